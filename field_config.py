"""Configuration model and validation for number fields.

Each field is parameterized by four values (``min``, ``max``, ``step`` and
``dec``) entered as text, where ``*`` means "no limit" (or, for ``dec``,
"use the default of two decimals"). The sentinel strings are resolved into
:class:`Bound` values here so the field logic never sees them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

UNBOUNDED_SENTINEL = "*"
DEFAULT_DECIMALS = 2


class ConfigurationError(ValueError):
    """Raised when a configuration value cannot be parsed."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class DecimalPolicy(Enum):
    """When the configured number of decimals is enforced."""

    COMMIT = "commit"
    LIVE_BLUR = "live_blur"


@dataclass(frozen=True)
class Bound:
    """Either unbounded or a concrete numeric limit."""

    value: Optional[float] = None

    @property
    def is_bounded(self) -> bool:
        return self.value is not None

    @classmethod
    def unbounded(cls) -> "Bound":
        return cls(None)

    @classmethod
    def of(cls, value: float) -> "Bound":
        return cls(float(value))

    @classmethod
    def parse(cls, text: Any, *, field: str = "bound") -> "Bound":
        """Parse configuration text; ``*`` or blank means unbounded."""

        if text is None:
            return cls.unbounded()
        if isinstance(text, (int, float)) and not isinstance(text, bool):
            return cls.of(text)
        raw = str(text).strip()
        if raw in ("", UNBOUNDED_SENTINEL):
            return cls.unbounded()
        try:
            value = float(raw)
        except ValueError:
            raise ConfigurationError(field, f"{field} must be a number or '*', got {raw!r}") from None
        if not math.isfinite(value):
            raise ConfigurationError(field, f"{field} must be a finite number, got {raw!r}")
        return cls.of(value)

    def __str__(self) -> str:
        if self.value is None:
            return UNBOUNDED_SENTINEL
        text = repr(self.value)
        return text[:-2] if text.endswith(".0") else text


@dataclass(frozen=True)
class FieldConfig:
    """Immutable parameters of a single number field."""

    min: Bound = Bound()
    max: Bound = Bound()
    step: Bound = Bound()
    decimals: int = DEFAULT_DECIMALS
    decimal_policy: DecimalPolicy = DecimalPolicy.COMMIT

    @classmethod
    def from_text(
        cls,
        min: Any = UNBOUNDED_SENTINEL,
        max: Any = UNBOUNDED_SENTINEL,
        step: Any = UNBOUNDED_SENTINEL,
        decimals: Any = UNBOUNDED_SENTINEL,
        decimal_policy: Any = DecimalPolicy.COMMIT,
    ) -> "FieldConfig":
        """Build a config from the four text values, raising on the first bad one."""

        return cls(
            min=Bound.parse(min, field="min"),
            max=Bound.parse(max, field="max"),
            step=Bound.parse(step, field="step"),
            decimals=_parse_decimals(decimals),
            decimal_policy=_parse_policy(decimal_policy),
        )

    def in_range(self, value: float) -> bool:
        """``True`` when ``value`` satisfies every bounded side."""

        if self.min.is_bounded and value < self.min.value:
            return False
        if self.max.is_bounded and value > self.max.value:
            return False
        return True

    def as_text(self) -> Dict[str, str]:
        return {
            "min": str(self.min),
            "max": str(self.max),
            "step": str(self.step),
            "decimals": str(self.decimals),
            "decimal_policy": self.decimal_policy.value,
        }


def _parse_decimals(value: Any) -> int:
    if value is None:
        return DEFAULT_DECIMALS
    if isinstance(value, bool):
        raise ConfigurationError("decimals", "decimals must be a whole number or '*'")
    if isinstance(value, int):
        decimals = value
    else:
        raw = str(value).strip()
        if raw in ("", UNBOUNDED_SENTINEL):
            return DEFAULT_DECIMALS
        try:
            decimals = int(raw)
        except ValueError:
            raise ConfigurationError(
                "decimals", f"decimals must be a whole number or '*', got {raw!r}"
            ) from None
    if decimals < 0:
        raise ConfigurationError("decimals", "decimals cannot be negative")
    return decimals


def _parse_policy(value: Any) -> DecimalPolicy:
    if isinstance(value, DecimalPolicy):
        return value
    try:
        return DecimalPolicy(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(policy.value for policy in DecimalPolicy)
        raise ConfigurationError(
            "decimal_policy", f"decimal policy must be one of: {choices}"
        ) from None


@dataclass(frozen=True)
class ValidationIssue:
    """Represents a configuration validation problem."""

    field: str
    title: str
    message: str


def validate_configuration(settings: Mapping[str, Any]) -> List[ValidationIssue]:
    """Validate a configuration payload.

    Parameters
    ----------
    settings:
        Mapping with any of ``min``, ``max``, ``step``, ``decimals`` and
        ``decimal_policy`` as gathered from the configuration boxes or the
        command line. Missing keys mean "use the default".

    Returns
    -------
    list[ValidationIssue]
        A collection of validation issues. An empty list denotes success.
    """

    issues: List[ValidationIssue] = []
    bounds: Dict[str, Bound] = {}

    for name, title in (("min", "Minimum"), ("max", "Maximum"), ("step", "Step")):
        try:
            bounds[name] = Bound.parse(settings.get(name), field=name)
        except ConfigurationError:
            issues.append(
                ValidationIssue(
                    field=name,
                    title=f"{title} Invalid",
                    message=f"{title} must be a number, or '*' for no limit.",
                )
            )

    lower, upper = bounds.get("min"), bounds.get("max")
    if lower and upper and lower.is_bounded and upper.is_bounded and lower.value > upper.value:
        issues.append(
            ValidationIssue(
                field="max",
                title="Range Inverted",
                message="The maximum must not be smaller than the minimum.",
            )
        )

    step = bounds.get("step")
    if step and step.is_bounded and step.value <= 0:
        issues.append(
            ValidationIssue(
                field="step",
                title="Step Not Positive",
                message="Use a step greater than zero, or '*' to disable wheel adjustment.",
            )
        )

    try:
        _parse_decimals(settings.get("decimals"))
    except ConfigurationError as exc:
        issues.append(
            ValidationIssue(field="decimals", title="Decimals Invalid", message=_sentence(exc))
        )

    if "decimal_policy" in settings:
        try:
            _parse_policy(settings["decimal_policy"])
        except ConfigurationError as exc:
            issues.append(
                ValidationIssue(field="decimal_policy", title="Decimal Policy Invalid", message=_sentence(exc))
            )

    return issues


def _sentence(exc: Exception) -> str:
    message = str(exc)
    return message[:1].upper() + message[1:] + "."
