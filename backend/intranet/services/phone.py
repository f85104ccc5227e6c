"""Ghana phone number normalization."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")
_GHANA_PHONE = re.compile(r"^233[0-9]{9}$")
COUNTRY_CODE = "233"
LOCAL_LENGTH = 9


def normalize_phone(raw: str | None) -> str:
    """Return the canonical ``233XXXXXXXXX`` form of a Ghana number.

    ``0241234567``, ``241234567``, ``+233 24 123 4567`` and ``233241234567``
    all map to ``233241234567``. Nine digits are always a local number, even
    when they start with 233 (Glo ``023...`` lines). Anything else is returned
    as bare digits; the result is not validated, use :func:`is_valid_phone`
    for that.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) == LOCAL_LENGTH + 1 and digits.startswith("0"):
        return COUNTRY_CODE + digits[1:]
    if len(digits) == LOCAL_LENGTH:
        return COUNTRY_CODE + digits
    return digits


def is_valid_phone(raw: str | None) -> bool:
    return bool(_GHANA_PHONE.match(normalize_phone(raw)))


def mask_phone(phone: str) -> str:
    """233241234567 -> 233******567, for logs."""
    if len(phone) <= 6:
        return "*" * len(phone)
    return phone[:3] + "*" * (len(phone) - 6) + phone[-3:]
