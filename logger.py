"""
Structured Logging System for Formula Field.
Provides logging with multiple levels, structured JSON extras,
and input-event specific helpers for the number entry widgets.
"""
import logging
import logging.handlers
import time
import json
import traceback
from pathlib import Path
from typing import Optional, Dict, Any, Union
from enum import Enum, auto
from datetime import datetime
import uuid
class LogLevel(Enum):
    """Log levels including a trace level below DEBUG."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
class LogCategory(Enum):
    """Categories for input-specific logging."""
    SYSTEM = auto()
    USER_ACTION = auto()
    INPUT = auto()
    FORMULA = auto()
    VALIDATION = auto()
    NAVIGATION = auto()
    CONFIG = auto()
class StructuredFormatter(logging.Formatter):
    """Custom formatter that supports structured logging with JSON output."""
    def __init__(self, include_json=True):
        super().__init__()
        self.include_json = include_json
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        level = record.levelname
        logger_name = record.name
        message = record.getMessage()
        basic_line = f"[{timestamp}] {level:8} {logger_name}: {message}"
        structured_data = {}
        # Extract custom fields
        for key, value in record.__dict__.items():
            if key.startswith('field_') or key in ['category', 'session_id']:
                structured_data[key] = value
        if record.exc_info:
            structured_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }
        structured_data['location'] = {
            'filename': record.filename,
            'line': record.lineno,
            'function': record.funcName
        }
        if structured_data and self.include_json:
            json_data = json.dumps(structured_data, default=str, ensure_ascii=False)
            return f"{basic_line} | {json_data}"
        return basic_line
class FormulaFieldLogger:
    """Logger for Formula Field with input-event helpers."""
    def __init__(self, name: str = "formulafield", log_dir: Optional[Path] = None):
        self.name = name
        self.session_id = str(uuid.uuid4())[:8]
        if log_dir is None:
            log_dir = Path.home() / "FormulaField" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_loggers()
        self.info("Formula Field logging system initialized",
                 session_id=self.session_id,
                 log_dir=str(self.log_dir))
    def _setup_loggers(self):
        """Setup main logger and handlers."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(logging.DEBUG)
        # Clear any existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(StructuredFormatter(include_json=False))
        self.logger.addHandler(console_handler)
        # File handler with rotation
        log_file = self.log_dir / f"{self.name}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter(include_json=True))
        self.logger.addHandler(file_handler)
        # Input events go to their own file, written explicitly by input_event()
        input_log_file = self.log_dir / f"{self.name}_input.log"
        self.input_handler = logging.handlers.RotatingFileHandler(
            input_log_file, maxBytes=5*1024*1024, backupCount=3, encoding="utf-8"
        )
        self.input_handler.setLevel(logging.DEBUG)
        self.input_handler.setFormatter(StructuredFormatter(include_json=True))
        error_log_file = self.log_dir / f"{self.name}_errors.log"
        error_handler = logging.handlers.RotatingFileHandler(
            error_log_file, maxBytes=5*1024*1024, backupCount=5, encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(StructuredFormatter(include_json=True))
        self.logger.addHandler(error_handler)
    def _log(self, level: int, message: str, category: Optional[Union[LogCategory, str]] = None,
             exception: Optional[Exception] = None, **kwargs):
        """Internal logging method adding session and category extras."""
        if isinstance(category, LogCategory):
            category_name = category.name
        elif category:
            category_name = str(category).upper()
        else:
            category_name = 'GENERAL'
        extra = {
            'session_id': self.session_id,
            'category': category_name
        }
        for key, value in kwargs.items():
            if not key.startswith('_'):
                extra[f'field_{key}'] = value
        if exception:
            self.logger.log(level, message, exc_info=(type(exception), exception, exception.__traceback__), extra=extra)
        else:
            self.logger.log(level, message, extra=extra)
    def trace(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log trace message (keystroke-level detail)."""
        self._log(LogLevel.TRACE.value, message, category, **kwargs)
    def debug(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG.value, message, category, **kwargs)
    def info(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO.value, message, category, **kwargs)
    def warning(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING.value, message, category, **kwargs)
    def error(self, message: str, exception: Optional[Exception] = None,
              category: Optional[LogCategory] = None, **kwargs):
        """Log error message."""
        self._log(LogLevel.ERROR.value, message, category, exception, **kwargs)
    def critical(self, message: str, exception: Optional[Exception] = None,
                 category: Optional[LogCategory] = None, **kwargs):
        """Log critical message."""
        self._log(LogLevel.CRITICAL.value, message, category, exception, **kwargs)
    def input_event(self, message: str, **kwargs):
        """Log a field input event (commit, wheel, rejected key)."""
        self._log(LogLevel.DEBUG.value, f"INPUT: {message}",
                 LogCategory.INPUT, **kwargs)
        extra = {'session_id': self.session_id, 'category': 'INPUT'}
        for key, value in kwargs.items():
            if not key.startswith('_'):
                extra[f'field_{key}'] = value
        self.input_handler.handle(
            self.logger.makeRecord(self.name, LogLevel.DEBUG.value, __file__, 0,
                                 f"INPUT: {message}", (), None, extra=extra)
        )
    def log_user_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Log user actions for debugging."""
        log_data = {
            'action': action,
            'timestamp': time.time()
        }
        if details:
            log_data.update(details)
        self._log(LogLevel.INFO.value, f"USER ACTION: {action}",
                 LogCategory.USER_ACTION, **log_data)
    def log_commit(self, field_id: str, raw_text: str, result: Optional[str],
                   error: Optional[str] = None):
        """Log the outcome of a field commit for the audit trail."""
        level = LogLevel.WARNING.value if error else LogLevel.DEBUG.value
        category = LogCategory.VALIDATION if error else LogCategory.INPUT
        self._log(level, f"COMMIT: {field_id} {raw_text!r} -> {result!r}",
                 category, field_id=field_id, raw_text=raw_text,
                 result=result, error=error)
    def log_navigation(self, direction: str, source: str, target: Optional[str]):
        """Log focus navigation between fields."""
        self._log(LogLevel.DEBUG.value, f"NAVIGATION: {source} -> {target} ({direction})",
                 LogCategory.NAVIGATION, direction=direction, source=source, target=target)
    def set_log_level(self, level: Union[str, int, LogLevel]):
        """Set the logging level of the console handler."""
        if isinstance(level, LogLevel):
            level = level.value
        elif isinstance(level, str):
            level = getattr(logging, level.upper())
        for handler in self.logger.handlers:
            if type(handler) is logging.StreamHandler:
                handler.setLevel(level)
        self.info(f"Log level set to: {logging.getLevelName(level)}")
# Global logger instance
_global_logger: Optional[FormulaFieldLogger] = None
def get_logger() -> FormulaFieldLogger:
    """Get the global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = FormulaFieldLogger()
    return _global_logger
def setup_logger(name: str = "formulafield", log_dir: Optional[Path] = None) -> FormulaFieldLogger:
    """Set up and return the global logger."""
    global _global_logger
    _global_logger = FormulaFieldLogger(name, log_dir)
    return _global_logger
# Mixin class for easy logging integration
class LoggableMixin:
    """Mixin class to add logging capabilities to other classes."""
    def __init__(self):
        self._logger = get_logger()
        self._module_name = self.__class__.__name__
    def log_trace(self, message: str, **kwargs):
        """Log trace message."""
        self._logger.trace(f"[{self._module_name}] {message}", **kwargs)
    def log_debug(self, message: str, **kwargs):
        """Log debug message."""
        self._logger.debug(f"[{self._module_name}] {message}", **kwargs)
    def log_info(self, message: str, **kwargs):
        """Log info message."""
        self._logger.info(f"[{self._module_name}] {message}", **kwargs)
    def log_warning(self, message: str, **kwargs):
        """Log warning message."""
        self._logger.warning(f"[{self._module_name}] {message}", **kwargs)
    def log_input_event(self, message: str, **kwargs):
        """Log input event."""
        self._logger.input_event(f"[{self._module_name}] {message}", **kwargs)
    def log_user_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Log user action."""
        action_details = {'module': self._module_name}
        if details:
            action_details.update(details)
        self._logger.log_user_action(action, action_details)
