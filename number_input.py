"""
Number Input Widget for Formula Field.
QLineEdit that accepts plain numbers or ``=`` formulas and settles them into
formatted, range-checked values. All value logic lives in FieldController;
this module translates Qt events into controller calls and mirrors the
controller's buffer and error flag back into the widget.
"""
from PySide6.QtWidgets import QLineEdit, QWidget
from PySide6.QtCore import Qt, Signal, QTimer, QEvent
from PySide6.QtGui import QKeyEvent, QFocusEvent, QWheelEvent
from typing import Optional
from field_config import FieldConfig
from field_controller import (
    FieldController, KeyResult,
    KEY_BACKSPACE, KEY_DELETE, KEY_TAB, KEY_ENTER,
    KEY_LEFT, KEY_RIGHT, KEY_UP, KEY_DOWN,
)
from form_coordinator import FormCoordinator
from formula import Evaluator
from formatting import parse_number, remove_thousands_separators
from logger import LoggableMixin
_NAMED_KEYS = {
    int(Qt.Key_Backspace): KEY_BACKSPACE,
    int(Qt.Key_Delete): KEY_DELETE,
    int(Qt.Key_Tab): KEY_TAB,
    int(Qt.Key_Backtab): KEY_TAB,
    int(Qt.Key_Return): KEY_ENTER,
    int(Qt.Key_Enter): KEY_ENTER,
    int(Qt.Key_Left): KEY_LEFT,
    int(Qt.Key_Right): KEY_RIGHT,
    int(Qt.Key_Up): KEY_UP,
    int(Qt.Key_Down): KEY_DOWN,
}
_TAB_KEYS = (int(Qt.Key_Tab), int(Qt.Key_Backtab))
class NumberLineEdit(QLineEdit, LoggableMixin):
    """Line edit for numbers and formulas with tab-order navigation."""
    # Signals
    value_changed = Signal(str)
    error_changed = Signal(bool)
    def __init__(self, field_id: str, coordinator: Optional[FormCoordinator] = None,
                 config: Optional[FieldConfig] = None, evaluator: Optional[Evaluator] = None,
                 parent: Optional[QWidget] = None):
        QLineEdit.__init__(self, parent)
        LoggableMixin.__init__(self)
        self.field_id = field_id
        self.coordinator = coordinator
        self.setObjectName(field_id)
        self.setProperty("error", False)
        if coordinator is not None:
            self.controller = coordinator.create_controller(
                field_id, on_change=self._handle_value_changed,
                evaluator=evaluator, host=self)
            coordinator.register(field_id, self)
        else:
            self.controller = FieldController(
                field_id, config, evaluator=evaluator,
                on_change=self._handle_value_changed, host=self)
        self._shown_error = False
        self.textEdited.connect(self._handle_text_edited)
        self.log_debug(f"Number input {field_id} created")
    # ------------------------------------------------------------------
    # FocusTarget / FieldHost
    # ------------------------------------------------------------------
    def request_focus(self) -> bool:
        """Take focus on behalf of the form; refuse when hidden or disabled."""
        if not self.isVisible() or not self.isEnabled():
            return False
        self.setFocus(Qt.TabFocusReason)
        return True
    def restore_focus(self):
        """Pull focus back after a failed commit.

        Qt calls focusOutEvent before the focus change has completed, so an
        immediate setFocus here would be undone by the widget taking focus.
        The request is queued until the current event has been handled.
        """
        QTimer.singleShot(0, self._restore_focus_now)
    def _restore_focus_now(self):
        if self.isVisible() and self.isEnabled() and not self.hasFocus():
            self.setFocus(Qt.OtherFocusReason)
    def release_focus(self):
        """Blur the field, which commits its value."""
        if self.hasFocus():
            self.clearFocus()
        else:
            # Not focused (e.g. off-screen); commit directly
            self.controller.on_blur()
            self._refresh()
    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def event(self, event: QEvent) -> bool:
        # Tab never reaches keyPressEvent otherwise; QWidget uses it to move focus
        if event.type() == QEvent.KeyPress and int(event.key()) in _TAB_KEYS:
            self.keyPressEvent(event)
            return True
        return super().event(event)
    def keyPressEvent(self, event: QKeyEvent):
        key = _NAMED_KEYS.get(int(event.key()), event.text())
        accelerator = bool(event.modifiers() & (Qt.ControlModifier | Qt.MetaModifier))
        result = self.controller.on_key_press(
            key, self.cursorPosition(), len(self.text()), accelerator=accelerator)
        if result is KeyResult.PASSTHROUGH:
            super().keyPressEvent(event)
            return
        self._refresh()
        event.accept()
    def focusInEvent(self, event: QFocusEvent):
        super().focusInEvent(event)
        text = self.controller.on_focus_gained()
        if text != self.text():
            self.setText(text)
        self.setCursorPosition(0)
    def focusOutEvent(self, event: QFocusEvent):
        super().focusOutEvent(event)
        if event.reason() == Qt.PopupFocusReason:
            # Context menus borrow focus without ending the edit
            return
        self.controller.on_blur()
        self._refresh()
    def wheelEvent(self, event: QWheelEvent):
        if self.controller.on_wheel(event.angleDelta().y()):
            self._refresh()
            event.accept()
            return
        super().wheelEvent(event)
    def _handle_text_edited(self, text: str):
        self.controller.on_text_changed(text)
    def _handle_value_changed(self, formatted: str):
        self.value_changed.emit(formatted)
    # ------------------------------------------------------------------
    # State mirroring
    # ------------------------------------------------------------------
    def _refresh(self):
        """Mirror the controller buffer and error flag into the widget."""
        if self.text() != self.controller.text:
            self.setText(self.controller.text)
        has_error = self.controller.has_error
        if has_error != self._shown_error:
            self._shown_error = has_error
            self.setProperty("error", has_error)
            # Re-polish so ``[error="true"]`` style sheet rules apply
            self.style().unpolish(self)
            self.style().polish(self)
            self.error_changed.emit(has_error)
        last_error = self.controller.state.last_error
        self.setToolTip(str(last_error) if last_error else "")
    def configure(self, config: FieldConfig):
        """Apply a configuration to a standalone field."""
        self.controller.configure(config)
    def has_error(self) -> bool:
        return self.controller.has_error
    def value(self) -> Optional[float]:
        """Numeric value of a settled field, or None when empty or invalid."""
        return parse_number(remove_thousands_separators(self.controller.text))
