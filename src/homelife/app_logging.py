"""Logging configuration helpers."""

import logging

# Identifiers services attach through ``extra=`` that are safe to print.
CONTEXT_FIELDS = (
    "household_id",
    "user_id",
    "item_id",
    "week_id",
    "meal_id",
    "recipe_id",
    "shopping_list_id",
    "event",
    "status_code",
    "path",
)


class ContextFormatter(logging.Formatter):
    """Formatter that appends known context identifiers to the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        if not context:
            return message
        return f"{message} [{' '.join(context)}]"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("homelife")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
