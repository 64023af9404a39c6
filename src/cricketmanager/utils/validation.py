"""Field validation for organizer, tournament and team forms.

Each ``validate_*`` function returns a :class:`ValidationResult`; the
``*_strict`` variants raise the matching typed exception instead.
"""

import re
from datetime import date
from typing import Any, Optional

from cricketmanager.constants import MIN_PASSWORD_LENGTH, PINCODE_LENGTH
from cricketmanager.exceptions import (
    EmailValidationException,
    PhoneValidationException,
)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_SEPARATORS = re.compile(r"[\s\-\.\(\)\+]")
NAME_PUNCTUATION = " -'."


class ValidationResult:
    """Outcome of checking one field.

    Attributes:
        is_valid: Whether the value was accepted
        error_message: Why it was rejected
        sanitized_value: The normalized value to store
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    @classmethod
    def ok(cls, value: Any = None) -> "ValidationResult":
        return cls(True, sanitized_value=value)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(False, error_message=message)

    def __bool__(self) -> bool:
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _optional(label: str, required: bool) -> ValidationResult:
    """Result for a field left empty."""
    if required:
        return ValidationResult.fail(f"{label} is required")
    return ValidationResult.ok(None)


# ========== Contact details ==========


def validate_email(email: Optional[str], required: bool = False) -> ValidationResult:
    """Validate an account email address.

    Accounts are unique by email, so the sanitized value is lower-cased.

    Example:
        >>> validate_email("Organizer@Example.com").sanitized_value
        'organizer@example.com'
    """
    if _blank(email):
        return _optional("Email address", required)

    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        return ValidationResult.fail(f"Invalid email format: {email}")
    return ValidationResult.ok(email.lower())


def validate_email_strict(email: str) -> str:
    """Return the normalized address or raise EmailValidationException."""
    result = validate_email(email, required=True)
    if not result:
        raise EmailValidationException(result.error_message)
    return result.sanitized_value


def validate_phone(phone: Optional[str], required: bool = False) -> ValidationResult:
    """Validate a contact number and reduce it to digits.

    Spaces, dashes, dots, brackets and a leading ``+`` are ignored, so
    ``+91 98765 43210`` and ``(022) 2345-6789`` are both accepted. Ten
    digits for a local mobile, up to fifteen with a country code.
    """
    if _blank(phone):
        return _optional("Phone number", required)

    phone = phone.strip()
    digits = PHONE_SEPARATORS.sub("", phone)
    if not digits.isdigit():
        return ValidationResult.fail(f"Phone number contains invalid characters: {phone}")
    if not 10 <= len(digits) <= 15:
        return ValidationResult.fail(f"Phone number must be 10-15 digits: {phone}")
    return ValidationResult.ok(digits)


def validate_phone_strict(phone: str) -> str:
    """Return the digits of a phone number or raise PhoneValidationException."""
    result = validate_phone(phone, required=True)
    if not result:
        raise PhoneValidationException(result.error_message)
    return result.sanitized_value


def validate_name(name: Optional[str], required: bool = True) -> ValidationResult:
    """Validate a person's name; letters from any script are accepted."""
    if _blank(name):
        return _optional("Name", required)

    name = " ".join(name.split())
    if len(name) < 2:
        return ValidationResult.fail("Name must be at least 2 characters")
    if any(not (ch.isalpha() or ch in NAME_PUNCTUATION) for ch in name):
        return ValidationResult.fail("Name contains invalid characters")
    return ValidationResult.ok(name)


def validate_password(password: Optional[str]) -> ValidationResult:
    if not password:
        return ValidationResult.fail("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.fail(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return ValidationResult.ok(password)


# ========== Tournament fields ==========


def validate_non_empty(value: Optional[str], field_name: str = "Field") -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail(f"{field_name} cannot be empty")
    return ValidationResult.ok(str(value).strip())


def validate_positive_integer(value: Any, field_name: str = "Value") -> ValidationResult:
    """Validate a count such as ``maxTeams``.

    Numeric strings are accepted; booleans and fractional numbers are not.
    """
    if value is None or value == "":
        return ValidationResult.fail(f"{field_name} is required")
    if isinstance(value, bool):
        return ValidationResult.fail(f"{field_name} must be a number")

    try:
        number = int(value)
    except (ValueError, TypeError):
        return ValidationResult.fail(f"{field_name} must be a number")

    if number != value and str(number) != str(value).strip():
        return ValidationResult.fail(f"{field_name} must be a whole number")
    if number <= 0:
        return ValidationResult.fail(f"{field_name} must be positive")
    return ValidationResult.ok(number)


def validate_amount(
    value: Any, field_name: str = "Amount", required: bool = True
) -> ValidationResult:
    """Validate a prize amount: a non-negative whole number of rupees."""
    if value is None or value == "":
        return _optional(field_name, required)
    if isinstance(value, bool):
        return ValidationResult.fail(f"{field_name} must be a number")

    try:
        amount = float(value)
    except (ValueError, TypeError):
        return ValidationResult.fail(f"{field_name} must be a number")

    if amount < 0 or not amount.is_integer():
        return ValidationResult.fail(f"{field_name} must be a non-negative whole number")
    return ValidationResult.ok(int(amount))


def validate_pincode(pincode: Optional[str], required: bool = False) -> ValidationResult:
    """Validate a six digit postal index number."""
    if _blank(pincode):
        return _optional("Pincode", required)

    pincode = str(pincode).strip().replace(" ", "")
    if not pincode.isdigit() or len(pincode) != PINCODE_LENGTH:
        return ValidationResult.fail(f"Pincode must be {PINCODE_LENGTH} digits: {pincode}")
    return ValidationResult.ok(pincode)


def validate_date_range(start: Optional[date], end: Optional[date]) -> ValidationResult:
    if start is None or end is None:
        return ValidationResult.fail("Start date and end date are required")
    if start > end:
        return ValidationResult.fail(
            f"Start date {start.isoformat()} is after end date {end.isoformat()}"
        )
    return ValidationResult.ok((start, end))
