from logger import LogCategory, setup_logger


def flush(logger):
    for handler in logger.logger.handlers:
        handler.flush()
    logger.input_handler.flush()


def test_logger_accepts_string_category(tmp_path):
    log_dir = tmp_path / "logs"
    logger = setup_logger(log_dir=log_dir)

    logger.info("String category entry", category="DATA", extra_field="value")
    flush(logger)

    log_file = log_dir / "formulafield.log"
    assert log_file.exists()
    content = log_file.read_text(encoding="utf-8")
    assert "String category entry" in content
    assert '"category": "DATA"' in content
    assert '"field_extra_field": "value"' in content


def test_input_events_have_their_own_file(tmp_path):
    logger = setup_logger(log_dir=tmp_path)

    logger.input_event("wheel on amount", field="amount", delta=120)
    flush(logger)

    content = (tmp_path / "formulafield_input.log").read_text(encoding="utf-8")
    assert "INPUT: wheel on amount" in content
    assert '"field_delta": 120' in content


def test_failed_commit_is_logged_as_validation_warning(tmp_path):
    logger = setup_logger(log_dir=tmp_path)

    logger.log_commit("amount", "=2+", None, error="Invalid formula")
    logger.log_commit("amount", "5", "5.00")
    flush(logger)

    lines = (tmp_path / "formulafield.log").read_text(encoding="utf-8").splitlines()
    failed = next(line for line in lines if "'=2+'" in line)
    settled = next(line for line in lines if "'5.00'" in line)
    assert "WARNING" in failed
    assert f'"category": "{LogCategory.VALIDATION.name}"' in failed
    assert "DEBUG" in settled
    assert '"category": "INPUT"' in settled


def test_errors_are_copied_to_error_log(tmp_path):
    logger = setup_logger(log_dir=tmp_path)

    try:
        raise ValueError("boom")
    except ValueError as exc:
        logger.error("Something failed", exception=exc)
    logger.info("Not an error")
    flush(logger)

    content = (tmp_path / "formulafield_errors.log").read_text(encoding="utf-8")
    assert "Something failed" in content
    assert '"type": "ValueError"' in content
    assert "Not an error" not in content


def test_user_actions_record_their_details(tmp_path):
    logger = setup_logger(log_dir=tmp_path)

    logger.log_user_action("apply_configuration", {"min": "0", "accepted": True})
    flush(logger)

    content = (tmp_path / "formulafield.log").read_text(encoding="utf-8")
    assert "USER ACTION: apply_configuration" in content
    assert '"category": "USER_ACTION"' in content
    assert '"field_min": "0"' in content
    assert '"field_accepted": true' in content
