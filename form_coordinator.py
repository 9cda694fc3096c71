"""Navigation and shared configuration for a form of number fields.

The coordinator keeps the tab order of the form as an immutable tuple of
field identifiers and moves focus between fields when a field asks to go to
its previous or next neighbour. It also owns the min/max/step/decimals
configuration and hands it, by value, to every controller it creates.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from field_config import ConfigurationError, FieldConfig, ValidationIssue, validate_configuration
from field_controller import (
    ChangeCallback,
    Direction,
    FieldController,
    FieldHost,
    FocusTarget,
)
from formula import Evaluator
from logger import LoggableMixin


class FormCoordinator(LoggableMixin):
    """Owns the field order and dispatches previous/next focus requests."""

    def __init__(self, field_ids: Sequence[str], config: Optional[FieldConfig] = None):
        LoggableMixin.__init__(self)
        order = tuple(field_ids)
        if len(set(order)) != len(order):
            raise ValueError(f"Field identifiers must be unique: {order}")
        self._order = order
        self._positions = {field_id: index for index, field_id in enumerate(order)}
        self._config = config or FieldConfig()
        self._targets: Dict[str, FocusTarget] = {}
        self._controllers: Dict[str, FieldController] = {}
        self.log_debug("Form coordinator initialized", fields=list(order))

    @property
    def field_ids(self) -> tuple:
        return self._order

    @property
    def config(self) -> FieldConfig:
        return self._config

    def register(self, field_id: str, target: FocusTarget) -> None:
        """Attach the focus target for ``field_id``."""
        if field_id not in self._positions:
            raise KeyError(f"Unknown field {field_id!r}")
        self._targets[field_id] = target

    def unregister(self, field_id: str) -> None:
        self._targets.pop(field_id, None)

    def create_controller(
        self,
        field_id: str,
        *,
        on_change: Optional[ChangeCallback] = None,
        evaluator: Optional[Evaluator] = None,
        host: Optional[FieldHost] = None,
    ) -> FieldController:
        """Build a controller wired to this form's navigation and config."""
        if field_id not in self._positions:
            raise KeyError(f"Unknown field {field_id!r}")
        controller = FieldController(
            field_id,
            self._config,
            evaluator=evaluator,
            on_change=on_change,
            on_navigate=self.navigate,
            host=host,
        )
        self._controllers[field_id] = controller
        return controller

    def controller(self, field_id: str) -> Optional[FieldController]:
        return self._controllers.get(field_id)

    def resolve(self, direction: Direction, from_field_id: str) -> Optional[str]:
        """Identifier of the neighbour of ``from_field_id``, wrapping at both ends."""
        index = self._positions.get(from_field_id)
        if index is None:
            return None
        offset = -1 if direction is Direction.PREVIOUS else 1
        return self._order[(index + offset) % len(self._order)]

    def navigate(self, direction: Direction, from_field_id: str) -> Optional[str]:
        """Move focus to the neighbouring field.

        Returns the identifier of the field that took focus, or ``None`` when
        the source is unknown or the target is missing or refuses focus.
        """
        target_id = self.resolve(direction, from_field_id)
        if target_id is None:
            self.log_debug(f"Navigation from unknown field {from_field_id!r} ignored")
            return None

        target = self._targets.get(target_id)
        if target is None or not target.request_focus():
            self.log_debug(f"Field {target_id!r} cannot take focus")
            return None

        self._logger.log_navigation(direction.value, from_field_id, target_id)
        return target_id

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def apply_config(self, config: FieldConfig) -> None:
        """Store ``config`` and push it to every controller of the form."""
        self._config = config
        for controller in self._controllers.values():
            controller.configure(config)
        self.log_info("Field configuration applied", **config.as_text())

    def apply_config_text(self, **settings: Any) -> List[ValidationIssue]:
        """Validate text settings and apply them when they are all valid.

        Keys not given keep their current value. On failure the previous
        configuration stays in place and the issues are returned.
        """
        merged = self._config.as_text()
        merged.update({key: value for key, value in settings.items() if value is not None})
        issues = validate_configuration(merged)
        if issues:
            self.log_warning(
                "Rejected field configuration",
                issues=[f"{issue.field}: {issue.title}" for issue in issues],
            )
            return issues
        try:
            config = FieldConfig.from_text(**merged)
        except ConfigurationError as exc:
            return [ValidationIssue(field=exc.field, title="Invalid Value", message=str(exc))]
        self.apply_config(config)
        return []
