"""Tests for form navigation and shared configuration."""

import pytest

from field_config import FieldConfig
from field_controller import Direction, KeyResult
from form_coordinator import FormCoordinator


class FakeTarget:
    def __init__(self, accepts=True):
        self.accepts = accepts
        self.requests = 0

    def request_focus(self):
        self.requests += 1
        return self.accepts


def build_form(field_ids=("first", "second", "third"), config=None):
    coordinator = FormCoordinator(field_ids, config)
    targets = {field_id: FakeTarget() for field_id in field_ids}
    for field_id, target in targets.items():
        coordinator.register(field_id, target)
    return coordinator, targets


def test_duplicate_identifiers_are_rejected():
    with pytest.raises(ValueError):
        FormCoordinator(["a", "b", "a"])


def test_field_order_is_immutable():
    coordinator, _ = build_form()
    assert coordinator.field_ids == ("first", "second", "third")
    assert isinstance(coordinator.field_ids, tuple)


def test_next_moves_forward():
    coordinator, targets = build_form()
    assert coordinator.navigate(Direction.NEXT, "first") == "second"
    assert targets["second"].requests == 1


def test_previous_moves_backward():
    coordinator, targets = build_form()
    assert coordinator.navigate(Direction.PREVIOUS, "third") == "second"
    assert targets["second"].requests == 1


def test_next_from_last_wraps_to_first():
    coordinator, targets = build_form()
    assert coordinator.navigate(Direction.NEXT, "third") == "first"
    assert targets["first"].requests == 1


def test_previous_from_first_wraps_to_last():
    coordinator, targets = build_form()
    assert coordinator.navigate(Direction.PREVIOUS, "first") == "third"
    assert targets["third"].requests == 1


def test_single_field_navigates_to_itself():
    coordinator, targets = build_form(("only",))
    assert coordinator.navigate(Direction.NEXT, "only") == "only"
    assert targets["only"].requests == 1


def test_unknown_source_is_ignored():
    coordinator, targets = build_form()
    assert coordinator.navigate(Direction.NEXT, "missing") is None
    assert all(target.requests == 0 for target in targets.values())


def test_unregistered_target_is_a_silent_no_op():
    coordinator, _ = build_form()
    coordinator.unregister("second")
    assert coordinator.navigate(Direction.NEXT, "first") is None


def test_target_refusing_focus_is_a_silent_no_op():
    coordinator, targets = build_form()
    targets["second"].accepts = False
    assert coordinator.navigate(Direction.NEXT, "first") is None
    assert targets["second"].requests == 1


def test_register_unknown_field_raises():
    coordinator, _ = build_form()
    with pytest.raises(KeyError):
        coordinator.register("elsewhere", FakeTarget())


def test_controllers_navigate_through_the_coordinator():
    coordinator, targets = build_form()
    controller = coordinator.create_controller("third")

    assert controller.on_key_press("ArrowDown", 0, 0) is KeyResult.CONSUMED
    assert targets["first"].requests == 1
    assert controller.on_key_press("ArrowLeft", 0, 3) is KeyResult.CONSUMED
    assert targets["second"].requests == 1


def test_controllers_receive_the_shared_config():
    config = FieldConfig.from_text(min="1", decimals="3")
    coordinator, _ = build_form(config=config)
    controller = coordinator.create_controller("first")
    assert controller.config == config
    assert coordinator.controller("first") is controller


def test_apply_config_reaches_every_controller():
    coordinator, _ = build_form()
    controllers = [coordinator.create_controller(field_id) for field_id in coordinator.field_ids]
    config = FieldConfig.from_text(step="5", decimals="0")

    coordinator.apply_config(config)

    assert all(controller.config == config for controller in controllers)


def test_apply_config_text_merges_with_current_values():
    coordinator, _ = build_form(config=FieldConfig.from_text(min="0"))
    controller = coordinator.create_controller("first")

    issues = coordinator.apply_config_text(max="100", decimals="1")

    assert issues == []
    assert controller.config.min.value == 0.0
    assert controller.config.max.value == 100.0
    assert controller.config.decimals == 1


def test_invalid_config_text_keeps_previous_config():
    original = FieldConfig.from_text(min="0", max="10")
    coordinator, _ = build_form(config=original)
    controller = coordinator.create_controller("first")

    issues = coordinator.apply_config_text(min="20")

    assert [issue.field for issue in issues] == ["max"]
    assert coordinator.config == original
    assert controller.config == original
