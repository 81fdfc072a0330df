"""
Donor detail validation.

Everything here is pure: no I/O, no exceptions. Each ``validate_*`` helper
returns a human-readable error message, or None when the value is fine.
"""
import re
from dataclasses import dataclass, field

from donation_portal.models.donation import DonorInfo

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

MAX_EMAIL_LENGTH = 254
MAX_LOCAL_PART_LENGTH = 64
MIN_DOMAIN_LENGTH = 4
MIN_TLD_LENGTH = 2
PHONE_DIGITS = 10

_NON_DIGITS = re.compile(r"\D")


def validate_email(value: str | None) -> str | None:
    email = (value or "").strip()

    if not email:
        return "Email is required"
    if not EMAIL_PATTERN.match(email):
        return "Please provide a valid email address"
    if len(email) > MAX_EMAIL_LENGTH:
        return "Email address is too long"
    if email.startswith(".") or email.endswith("."):
        return "Email address may not start or end with a dot"
    if ".." in email:
        return "Email address may not contain consecutive dots"

    local_part, _, domain = email.partition("@")
    if len(local_part) > MAX_LOCAL_PART_LENGTH:
        return "Email address username is too long"
    if len(domain) < MIN_DOMAIN_LENGTH:
        return "Please provide a valid domain"

    tld = domain.rsplit(".", 1)[-1]
    if len(tld) < MIN_TLD_LENGTH:
        return "Please provide a valid domain"

    return None


def normalize_phone(value: str | None) -> str:
    """Digits only, truncated to a local-format number."""
    return _NON_DIGITS.sub("", value or "")[:PHONE_DIGITS]


def validate_phone(value: str | None) -> str | None:
    digits = normalize_phone(value)

    if not digits:
        return "Phone number is required"
    if not digits.startswith("0"):
        return "Phone number must start with 0"
    if len(digits) < PHONE_DIGITS:
        return "Phone number must be 10 digits"
    return None


def format_phone(value: str | None) -> str:
    # 082 832 2321
    digits = normalize_phone(value)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]} {digits[3:]}"
    return f"{digits[:3]} {digits[3:6]} {digits[6:]}"


@dataclass
class DonorValidation:
    donor: DonorInfo | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_donor(
    email: str | None,
    first_name: str | None,
    last_name: str | None,
    phone: str | None,
) -> DonorValidation:
    errors: dict[str, str] = {}

    email_error = validate_email(email)
    if email_error:
        errors["email"] = email_error

    if not (first_name or "").strip():
        errors["firstName"] = "First name is required"

    if not (last_name or "").strip():
        errors["lastName"] = "Last name is required"

    phone_error = validate_phone(phone)
    if phone_error:
        errors["phone"] = phone_error

    if errors:
        return DonorValidation(errors=errors)

    donor = DonorInfo(
        email=email.strip(),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        phone=normalize_phone(phone),
    )
    return DonorValidation(donor=donor)
