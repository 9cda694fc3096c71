"""Smoke tests for the Formula Field entrypoint module."""

from __future__ import annotations

import builtins
import importlib.util
import io
import sys
import types
from contextlib import redirect_stdout
from pathlib import Path

import pytest


def load_entrypoint_module():
    """Load the project entrypoint module without running it as ``__main__``."""
    module_path = Path(__file__).resolve().parents[1] / "__main__.py"
    spec = importlib.util.spec_from_file_location("formula_field_entry", module_path)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def entry_module():
    return load_entrypoint_module()


def run_main(entry_module, argv):
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        exit_code = entry_module.main(argv)
    return exit_code, buffer.getvalue()


def test_check_dependencies_reports_missing_required(entry_module, monkeypatch):
    """check_dependencies should fail gracefully when PySide6 is unavailable."""
    numpy_stub = types.ModuleType("numpy")
    numpy_stub.__version__ = "0.0"
    monkeypatch.setitem(sys.modules, "numpy", numpy_stub)

    real_import = builtins.__import__

    def fake_import(name, globals=None, locals=None, fromlist=(), level=0):  # noqa: D401
        if name.startswith("PySide6"):
            raise ImportError("No module named PySide6")
        return real_import(name, globals, locals, fromlist, level)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    buffer = io.StringIO()
    with redirect_stdout(buffer):
        result = entry_module.check_dependencies()

    output = buffer.getvalue()

    assert result is False
    assert "Missing required dependencies" in output
    assert "PySide6" in output
    assert "numpy" not in output.split("Missing required dependencies")[1]


def test_check_dependencies_succeeds_with_stubbed_gui(entry_module, monkeypatch):
    """check_dependencies should pass when core requirements are satisfied."""
    numpy_stub = types.ModuleType("numpy")
    numpy_stub.__version__ = "1.0"
    monkeypatch.setitem(sys.modules, "numpy", numpy_stub)

    pyside6 = types.ModuleType("PySide6")
    pyside6.__version__ = "6.0"
    pyside6.__file__ = "PySide6/__init__.py"
    pyside6.__path__ = []

    qtcore = types.ModuleType("PySide6.QtCore")
    qtwidgets = types.ModuleType("PySide6.QtWidgets")
    qtgui = types.ModuleType("PySide6.QtGui")
    pyside6.QtCore = qtcore
    pyside6.QtWidgets = qtwidgets
    pyside6.QtGui = qtgui

    monkeypatch.setitem(sys.modules, "PySide6", pyside6)
    monkeypatch.setitem(sys.modules, "PySide6.QtCore", qtcore)
    monkeypatch.setitem(sys.modules, "PySide6.QtWidgets", qtwidgets)
    monkeypatch.setitem(sys.modules, "PySide6.QtGui", qtgui)

    buffer = io.StringIO()
    with redirect_stdout(buffer):
        result = entry_module.check_dependencies()

    assert result is True
    assert "OK numpy" in buffer.getvalue()


def test_main_reports_missing_dependencies(entry_module, monkeypatch, tmp_path):
    """The main function should exit early when dependencies are missing."""
    monkeypatch.setattr(entry_module, "check_dependencies", lambda: False)
    monkeypatch.setitem(sys.modules, "main", types.ModuleType("main"))

    exit_code, output = run_main(entry_module, ["--check-deps", "--log-dir", str(tmp_path)])

    assert exit_code == 1
    assert "Some dependencies are missing" in output


def test_main_refuses_to_start_without_dependencies(entry_module, monkeypatch, tmp_path):
    monkeypatch.setattr(entry_module, "check_dependencies", lambda: False)

    exit_code, output = run_main(entry_module, ["--log-dir", str(tmp_path)])

    assert exit_code == 1
    assert "--force" in output


def test_main_rejects_invalid_field_configuration(entry_module, monkeypatch, tmp_path):
    monkeypatch.setattr(entry_module, "check_dependencies", lambda: True)
    started = []
    main_stub = types.ModuleType("main")
    main_stub.main = lambda **kwargs: started.append(kwargs) or 0
    monkeypatch.setitem(sys.modules, "main", main_stub)

    exit_code, output = run_main(
        entry_module, ["--min", "20", "--max", "10", "--log-dir", str(tmp_path)])

    assert exit_code == 2
    assert "Invalid field configuration" in output
    assert "max:" in output
    assert started == []


def test_main_starts_the_form_with_the_parsed_configuration(entry_module, monkeypatch, tmp_path):
    monkeypatch.setattr(entry_module, "check_dependencies", lambda: True)
    started = []
    main_stub = types.ModuleType("main")
    main_stub.main = lambda **kwargs: started.append(kwargs) or 0
    monkeypatch.setitem(sys.modules, "main", main_stub)

    exit_code, _ = run_main(entry_module, [
        "--fields", "4", "--min", "0", "--step", "0.5", "--decimals", "3",
        "--decimal-policy", "live_blur", "--log-dir", str(tmp_path),
    ])

    assert exit_code == 0
    assert len(started) == 1
    config = started[0]["config"]
    assert started[0]["field_count"] == 4
    assert config.min.value == 0.0
    assert not config.max.is_bounded
    assert config.step.value == 0.5
    assert config.decimals == 3
    assert config.decimal_policy.value == "live_blur"


def test_build_config_defaults_to_unbounded(entry_module):
    args = entry_module.parse_arguments([])
    config, issues = entry_module.build_config(args)

    assert issues == []
    assert str(config.min) == "*"
    assert config.decimals == 2
