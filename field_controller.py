"""Value lifecycle of a single number field.

The controller owns the field's text buffer and error flag and implements
the transitions driven by user input: key filtering while editing, the
commit (blur) that evaluates formulas, parses, range-checks and formats the
value, and the wheel adjustment that runs a full commit cycle on its own.

It knows nothing about Qt. The widget that hosts it forwards events here and
implements :class:`FieldHost` so the controller can ask for focus changes.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from field_config import DecimalPolicy, FieldConfig
from formatting import (
    DECIMAL_POINT,
    format_display,
    format_fixed,
    fraction_digits,
    parse_number,
    remove_thousands_separators,
)
from formula import FORMULA_PREFIX, Evaluator, FormulaError, evaluate_formula, is_formula
from logger import LoggableMixin


class FieldInputError(ValueError):
    """Base class for recoverable input problems surfaced on a field."""


class FormulaEvaluationError(FieldInputError):
    """A formula starting with ``=`` could not be evaluated."""


class NumericParseError(FieldInputError):
    """The committed text is not a number."""


class RangeViolation(FieldInputError):
    """The committed number lies outside the configured min/max."""

    def __init__(self, message: str, value: float):
        super().__init__(message)
        self.value = value


class Direction(Enum):
    PREVIOUS = "previous"
    NEXT = "next"


class KeyResult(Enum):
    """Whether the host should perform the key's default action."""

    CONSUMED = "consumed"
    PASSTHROUGH = "passthrough"


class FieldMode(Enum):
    EDITING = "editing"
    SETTLED = "settled"


class FocusTarget(Protocol):
    """Anything that can be asked to take keyboard focus."""

    def request_focus(self) -> bool:
        ...


class FieldHost(Protocol):
    """Focus operations the controller needs from the widget hosting it."""

    def restore_focus(self) -> None:
        ...

    def release_focus(self) -> None:
        ...


ChangeCallback = Callable[[str], None]
NavigateCallback = Callable[[Direction, str], None]

ALLOWED_CHARACTERS = frozenset("0123456789.,=-+/*()")
KEY_BACKSPACE = "Backspace"
KEY_DELETE = "Delete"
KEY_TAB = "Tab"
KEY_ENTER = "Enter"
KEY_LEFT = "ArrowLeft"
KEY_RIGHT = "ArrowRight"
KEY_UP = "ArrowUp"
KEY_DOWN = "ArrowDown"
ARROW_KEYS = frozenset({KEY_LEFT, KEY_RIGHT, KEY_UP, KEY_DOWN})
CONTROL_KEYS = frozenset({KEY_BACKSPACE, KEY_DELETE}) | ARROW_KEYS
COMMIT_KEYS = frozenset({KEY_TAB, KEY_ENTER})


@dataclass
class FieldState:
    raw_text: str = ""
    has_error: bool = False
    mode: FieldMode = FieldMode.SETTLED
    last_error: Optional[FieldInputError] = None


class FieldController(LoggableMixin):
    """State machine for one formula-capable number field."""

    def __init__(
        self,
        field_id: str,
        config: Optional[FieldConfig] = None,
        *,
        evaluator: Optional[Evaluator] = None,
        on_change: Optional[ChangeCallback] = None,
        on_navigate: Optional[NavigateCallback] = None,
        host: Optional[FieldHost] = None,
    ):
        LoggableMixin.__init__(self)
        self.field_id = field_id
        self.config = config or FieldConfig()
        self.state = FieldState()
        self.evaluator = evaluator or evaluate_formula
        self.on_change = on_change
        self.on_navigate = on_navigate
        self.host = host

    @property
    def text(self) -> str:
        return self.state.raw_text

    @property
    def has_error(self) -> bool:
        return self.state.has_error

    def attach_host(self, host: FieldHost) -> None:
        self.host = host

    def configure(self, config: FieldConfig) -> None:
        """Replace the field parameters; the buffer is left as is."""
        self.config = config
        self.log_debug(f"{self.field_id} reconfigured", **config.as_text())

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def on_key_press(
        self,
        key: str,
        cursor_position: int,
        buffer_length: int,
        accelerator: bool = False,
    ) -> KeyResult:
        """Filter a key press while the field has focus.

        ``key`` is either a single character or one of the named keys
        (``Backspace``, ``Delete``, ``Tab``, ``Enter``, ``ArrowLeft`` ...).
        Returns :attr:`KeyResult.PASSTHROUGH` when the host should apply the
        key normally and :attr:`KeyResult.CONSUMED` when it must not.
        """
        if key == ",":
            self.state.raw_text += DECIMAL_POINT
            self.state.mode = FieldMode.EDITING
            return KeyResult.CONSUMED

        if key == FORMULA_PREFIX:
            if cursor_position == 0 and not is_formula(self.state.raw_text):
                return KeyResult.PASSTHROUGH
            return KeyResult.CONSUMED

        if key in COMMIT_KEYS:
            self._blur()
            return KeyResult.CONSUMED

        if key in ARROW_KEYS:
            direction = self._arrow_direction(key, cursor_position, buffer_length)
            if direction is None:
                return KeyResult.PASSTHROUGH
            self._request_navigation(direction)
            return KeyResult.CONSUMED

        if key in ALLOWED_CHARACTERS or key in CONTROL_KEYS or accelerator:
            return KeyResult.PASSTHROUGH

        self.log_trace(f"{self.field_id} rejected key {key!r}")
        return KeyResult.CONSUMED

    @staticmethod
    def _arrow_direction(key: str, cursor_position: int, buffer_length: int) -> Optional[Direction]:
        if key == KEY_UP:
            return Direction.PREVIOUS
        if key == KEY_DOWN:
            return Direction.NEXT
        if key == KEY_LEFT and cursor_position == 0:
            return Direction.PREVIOUS
        if key == KEY_RIGHT and cursor_position >= buffer_length:
            return Direction.NEXT
        return None

    def _request_navigation(self, direction: Direction) -> None:
        if self.on_navigate is None:
            return
        self.on_navigate(direction, self.field_id)

    def on_focus_gained(self) -> str:
        """Strip separators so the user edits the bare number.

        Returns the new buffer; the host places the cursor at its start.
        """
        self.state.raw_text = remove_thousands_separators(self.state.raw_text)
        self.state.mode = FieldMode.EDITING
        return self.state.raw_text

    def on_text_changed(self, new_text: str) -> None:
        """Take the edited text verbatim; validation waits for the commit."""
        self.state.raw_text = new_text
        self.state.mode = FieldMode.EDITING
        if (
            self.config.decimal_policy is DecimalPolicy.LIVE_BLUR
            and not is_formula(new_text)
            and fraction_digits(new_text) > self.config.decimals
        ):
            self.log_debug(f"{self.field_id} reached {self.config.decimals} decimals, committing")
            self._blur()

    def _blur(self) -> None:
        if self.host is not None:
            self.host.release_focus()
        else:
            self.on_blur()

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    def on_blur(self) -> bool:
        """Normalize the buffer when the field loses focus.

        Returns ``True`` when a formatted value was written back (including a
        range violation, which is flagged but kept) and ``False`` for the
        empty no-op and for formula or parse failures.
        """
        self.state.has_error = False
        self.state.last_error = None
        self.state.mode = FieldMode.SETTLED
        raw_text = self.state.raw_text
        if not raw_text:
            return False

        try:
            value = self._normalize(remove_thousands_separators(raw_text))
        except (FormulaEvaluationError, NumericParseError) as exc:
            self._fail(exc)
            self._logger.log_commit(self.field_id, raw_text, None, error=str(exc))
            if self.host is not None:
                self.host.restore_focus()
            return False

        formatted = self._write_back(value)
        self._logger.log_commit(
            self.field_id, raw_text, formatted,
            error=str(self.state.last_error) if self.state.last_error else None,
        )
        return True

    def _normalize(self, text: str) -> float:
        working = text
        if is_formula(working):
            expression = working[len(FORMULA_PREFIX):]
            try:
                result = self.evaluator(expression)
            except FormulaError as exc:
                raise FormulaEvaluationError(f"Cannot evaluate {expression!r}: {exc}") from exc
            except Exception as exc:
                # Injected evaluators may fail in any way
                raise FormulaEvaluationError(
                    f"Cannot evaluate {expression!r}: {type(exc).__name__}: {exc}"
                ) from exc
            if (
                isinstance(result, bool)
                or not isinstance(result, numbers.Real)
                or not math.isfinite(result)
            ):
                raise FormulaEvaluationError(
                    f"Formula {expression!r} did not produce a finite number: {result!r}"
                )
            working = format_fixed(float(result), self.config.decimals)

        value = parse_number(working)
        if value is None:
            raise NumericParseError(f"{working!r} is not a number")
        return value

    def _write_back(self, value: float) -> str:
        self._check_range(value)
        formatted = format_display(value, self.config.decimals)
        self.state.raw_text = formatted
        self.state.mode = FieldMode.SETTLED
        if self.on_change is not None:
            self.on_change(formatted)
        return formatted

    def _check_range(self, value: float) -> None:
        if self.config.in_range(value):
            return
        self._fail(
            RangeViolation(
                f"{value:g} is outside [{self.config.min}, {self.config.max}]", value
            )
        )

    def _fail(self, exc: FieldInputError) -> None:
        self.state.has_error = True
        self.state.last_error = exc

    # ------------------------------------------------------------------
    # Wheel
    # ------------------------------------------------------------------
    def on_wheel(self, delta: int) -> bool:
        """Step the value up (``delta > 0``) or down (``delta < 0``).

        Only active when a step is configured. An unparsable buffer counts
        as zero. Returns ``True`` when the wheel event was handled.
        """
        step = self.config.step
        if not step.is_bounded or delta == 0:
            return False

        self.state.has_error = False
        self.state.last_error = None
        current = parse_number(remove_thousands_separators(self.state.raw_text))
        if current is None:
            current = 0.0
        candidate = current + step.value if delta > 0 else current - step.value
        formatted = self._write_back(candidate)
        self.log_input_event(
            f"{self.field_id} wheel", delta=delta, value=formatted, has_error=self.state.has_error
        )
        return True
