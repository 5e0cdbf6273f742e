"""
Logging configuration for the airdrop claim engine.

Provides structured JSON logging for claim audit trails and debugging.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable for operation ID tracking
operation_id_var: ContextVar[str] = ContextVar('operation_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per record, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        operation_id = operation_id_var.get()
        if operation_id:
            log_data["operation_id"] = operation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Logger for claim audit events.

    Every claim attempt is logged as requested, then accepted or rejected.
    Administrative actions are logged as they happen.
    """

    def __init__(self, name: str = "airdrop.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            "event_type": event_type,
            "operation_id": operation_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def claim_requested(self, method: str, caller: str, recipient: str, amount: int) -> None:
        self._log(
            logging.INFO,
            "CLAIM_REQUESTED",
            method=method,
            caller=caller,
            recipient=recipient,
            amount=amount,
            message=f"{method} claim requested for {recipient}"
        )

    def claim_accepted(self, method: str, recipient: str, amount: int) -> None:
        self._log(
            logging.INFO,
            "CLAIM_ACCEPTED",
            method=method,
            recipient=recipient,
            amount=amount,
            message=f"{method} claim paid {amount} to {recipient}"
        )

    def claim_rejected(self, method: str, recipient: str, code: str, details: Optional[str] = None) -> None:
        self._log(
            logging.WARNING,
            "CLAIM_REJECTED",
            method=method,
            recipient=recipient,
            code=code,
            details=details,
            message=f"{method} claim rejected: {code}"
        )

    def signature_verification_disabled(self, administrator: str) -> None:
        self._log(
            logging.WARNING,
            "SIGNATURE_VERIFICATION_DISABLED",
            administrator=administrator,
            message=f"Signature claims disabled by {administrator}"
        )

    def unauthorized_attempt(self, caller: str, operation: str) -> None:
        self._log(
            logging.ERROR,
            "UNAUTHORIZED_ATTEMPT",
            caller=caller,
            operation=operation,
            message=f"{caller} attempted {operation}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_operation_id(operation_id: Optional[str] = None) -> str:
    """
    Set the operation ID for the current context.

    Returns:
        The operation ID that was set
    """
    if operation_id is None:
        operation_id = str(uuid.uuid4())
    operation_id_var.set(operation_id)
    return operation_id


def get_operation_id() -> str:
    return operation_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
