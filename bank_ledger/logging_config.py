"""
Ledger Logging Module

Structured logging for directory and transfer operations. Every ledger
record can carry the action, the account number and the transaction id
it concerns, plus free-form details.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import LedgerConfig, get_config


LEDGER_FIELDS = ("action", "account_number", "transaction_id", "details")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class JSONFormatter(logging.Formatter):
    """Renders a record and its ledger fields as one JSON object"""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in LEDGER_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(config: Optional[LedgerConfig] = None,
                  logger_name: str = "bank_ledger") -> logging.Logger:
    """
    Install one console handler on the ledger logger.

    Level and format ("json" or plain text) come from the ledger config.
    Calling it again replaces the handler instead of adding another.
    """
    config = config or get_config()
    logger = logging.getLogger(logger_name)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if config.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.propagate = False

    return logger


def get_logger(name: str = "bank_ledger") -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str, action: str,
               account_number: Optional[str] = None,
               transaction_id: Optional[str] = None, **details):
    """
    Log a ledger operation.

    Args:
        logger: Logger instance
        level: Log level name (info, warning, ...)
        message: Human readable message
        action: Operation name, eg. transfer or create_account
        account_number: Account the operation is about
        transaction_id: Transaction the operation produced
        **details: Other values, stored under "details"
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    logger.log(levelno, message, extra={
        "action": action,
        "account_number": account_number,
        "transaction_id": transaction_id,
        "details": details or None,
    })
