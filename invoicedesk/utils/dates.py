"""
Due-date normalization.

Due dates are stored as bare calendar dates. Anything carrying a time
component is cut down to its date part before it reaches the database.
"""

import logging
import re
from datetime import date, datetime
from typing import Any


logger = logging.getLogger(__name__)

_BARE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_due_date(value: Any) -> str | None:
    """
    Normalize a date-like value to ``YYYY-MM-DD``.

    Accepts ``date``/``datetime`` objects, bare ISO dates, ISO timestamps
    (with or without offset) and other ISO-8601 forms ``datetime`` can read.

    Returns:
        The bare date string, or None when the value is empty or unreadable
    """
    if value is None or value == "":
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if not isinstance(value, str):
        logger.warning("Unsupported due date type: %s", type(value).__name__)
        return None

    text = value.strip()
    if _BARE_DATE.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            logger.warning("Invalid due date: %s", text)
            return None

    if "T" in text:
        head = text.split("T", 1)[0]
        if _BARE_DATE.match(head):
            try:
                return date.fromisoformat(head).isoformat()
            except ValueError:
                logger.warning("Invalid due date: %s", text)
                return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        logger.warning("Invalid due date: %s", text)
        return None


def parse_due_date(value: Any) -> date | None:
    """Normalize and return a ``date`` object, or None."""
    normalized = normalize_due_date(value)
    return date.fromisoformat(normalized) if normalized else None
