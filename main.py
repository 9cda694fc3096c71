"""
Formula Field - Number Input Demo
Main Application Module
A small form of formula-capable number fields sharing one min/max/step/decimals
configuration, which can be edited at runtime from the boxes below the form.
"""
import sys
from typing import Dict, List, Optional
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QFormLayout,
    QGroupBox, QLabel, QLineEdit, QStatusBar, QMessageBox
)
from PySide6.QtCore import Qt
from field_config import FieldConfig, ValidationIssue
from form_coordinator import FormCoordinator
from logger import get_logger, setup_logger, LoggableMixin
from number_input import NumberLineEdit
APP_NAME = "Formula Field"
APP_VERSION = "1.0.0"
ERROR_STYLE = """
NumberLineEdit[error="true"] {
    border: 2px solid #c0392b;
    background-color: #fdecea;
}
QLineEdit[invalid="true"] {
    border: 2px solid #c0392b;
}
"""
CONFIG_FIELDS = [
    ("min", "Min (* for none):"),
    ("max", "Max (* for none):"),
    ("step", "Step (* for none):"),
    ("decimals", "Dec (* for 2):"),
]
def field_ids_for(count: int) -> List[str]:
    """Identifiers of the demo fields, in tab order."""
    return [f"field_{index + 1}" for index in range(max(1, count))]
class NumberFormWindow(QMainWindow, LoggableMixin):
    """Main window hosting the number fields and their configuration boxes."""
    def __init__(self, field_count: int = 3, config: Optional[FieldConfig] = None, parent=None):
        QMainWindow.__init__(self, parent)
        LoggableMixin.__init__(self)
        self.coordinator = FormCoordinator(field_ids_for(field_count), config)
        self.fields: Dict[str, NumberLineEdit] = {}
        self.config_inputs: Dict[str, QLineEdit] = {}
        self.setWindowTitle(f"{APP_NAME} Demo")
        self.setup_ui()
        self.setStyleSheet(ERROR_STYLE)
        self.log_info("Number form window created", fields=list(self.coordinator.field_ids))
    def setup_ui(self):
        """Build the form and the configuration group."""
        central = QWidget()
        layout = QVBoxLayout(central)
        form_group = QGroupBox("Number fields")
        form_layout = QFormLayout(form_group)
        for index, field_id in enumerate(self.coordinator.field_ids):
            field = NumberLineEdit(field_id, coordinator=self.coordinator)
            field.value_changed.connect(
                lambda value, fid=field_id: self._on_value_changed(fid, value))
            self.fields[field_id] = field
            form_layout.addRow(f"Field {index + 1}:", field)
        layout.addWidget(form_group)
        config_group = QGroupBox("Field configuration")
        config_layout = QFormLayout(config_group)
        current = self.coordinator.config.as_text()
        for key, label in CONFIG_FIELDS:
            box = QLineEdit(current[key])
            box.editingFinished.connect(self.apply_configuration)
            self.config_inputs[key] = box
            config_layout.addRow(label, box)
        layout.addWidget(config_group)
        self.issues_label = QLabel()
        self.issues_label.setWordWrap(True)
        self.issues_label.setStyleSheet("color: #c0392b;")
        layout.addWidget(self.issues_label)
        hint = QLabel("Try numbers, or formulas like =5+2. Arrow keys move between fields.")
        hint.setAlignment(Qt.AlignLeft)
        layout.addWidget(hint)
        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())
    def apply_configuration(self) -> List[ValidationIssue]:
        """Push the configuration boxes to every field."""
        settings = {key: box.text() for key, box in self.config_inputs.items()}
        issues = self.coordinator.apply_config_text(**settings)
        self.log_user_action("apply_configuration", {
            **settings,
            'accepted': not issues,
        })
        invalid = {issue.field for issue in issues}
        for key, box in self.config_inputs.items():
            box.setProperty("invalid", key in invalid)
            box.style().unpolish(box)
            box.style().polish(box)
        self.issues_label.setText("\n".join(f"{issue.title}: {issue.message}" for issue in issues))
        return issues
    def _on_value_changed(self, field_id: str, value: str):
        field = self.fields[field_id]
        suffix = " (out of range)" if field.has_error() else ""
        self.statusBar().showMessage(f"{field_id} = {value}{suffix}", 5000)
def main(field_count: int = 3, config: Optional[FieldConfig] = None, argv: Optional[List[str]] = None):
    """Main entry point for the Formula Field demo."""
    logger = get_logger()
    logger.info("=" * 60)
    logger.info(f"{APP_NAME} {APP_VERSION}")
    logger.info("=" * 60)
    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    try:
        window = NumberFormWindow(field_count, config)
        window.show()
        logger.info("Formula Field demo started successfully")
        exit_code = app.exec()
        logger.info(f"Formula Field demo exited with code: {exit_code}")
        return exit_code
    except Exception as e:
        logger.critical("Critical error starting Formula Field", exception=e)
        QMessageBox.critical(None, "Critical Error",
                             f"Failed to start {APP_NAME}:\n{str(e)}\n\nCheck logs for details.")
        return 1
if __name__ == "__main__":
    setup_logger()
    sys.exit(main())
