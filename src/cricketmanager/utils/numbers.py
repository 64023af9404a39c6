"""Tolerant number parsing for stored documents and config values."""

from typing import Any, Optional

from cricketmanager.utils import setup_logger

logger = setup_logger(__name__)


def coerce_int(
    value: Any, default: Optional[int] = None, field_name: str = "value"
) -> Optional[int]:
    """Read a whole number from a stored document without raising.

    Records already held by the authority may be malformed; anything that
    is not a whole number is logged and replaced by ``default``.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        logger.warning(f"Ignoring non-numeric {field_name}: {value!r}")
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except (ValueError, TypeError):
        logger.warning(f"Ignoring non-numeric {field_name}: {value!r}")
        return default
    if not number.is_integer():
        logger.warning(f"Ignoring fractional {field_name}: {value!r}")
        return default
    return int(number)
