"""Structural validation of identity fields.

Emails are only checked for shape (``local@domain``, no whitespace, no angle
brackets) since they have to survive being rendered into a trailer line.
"""

from typing import Optional

from ..errors import InvalidIdentity
from ..models import Identity, Kind


def validate_text(field: str, value: Optional[str]) -> str:
    """Ensure a free text field is non-empty and single-line.

    Returns:
        The value stripped of surrounding whitespace
    """
    if value is None or not value.strip():
        raise InvalidIdentity(field, value, f"the {field} must not be empty")
    value = value.strip()
    if "\n" in value or "\r" in value:
        raise InvalidIdentity(field, value, f"the {field} must fit on one line")
    return value


def validate_email(value: Optional[str]) -> str:
    """Ensure an email address is structurally well formed."""
    email = validate_text("email", value)
    if any(ch.isspace() for ch in email):
        raise InvalidIdentity("email", email, "the email must not contain whitespace")
    if "<" in email or ">" in email:
        raise InvalidIdentity("email", email, "the email must not contain '<' or '>'")
    if email.count("@") != 1:
        raise InvalidIdentity("email", email, "the email must contain exactly one '@'")
    local, domain = email.split("@")
    if not local or not domain:
        raise InvalidIdentity("email", email, "the email needs a local part and a domain")
    return email


def normalize_signing_key(value: Optional[str]) -> Optional[str]:
    """Blank signing keys mean "no key"."""
    if value is None or not value.strip():
        return None
    return value.strip()


def validate_identity(identity: Identity, kind: Kind) -> Identity:
    """Validate every field and return a cleaned copy of ``identity``.

    Raises:
        InvalidIdentity: If any field is malformed, or a navigator carries
            a signing key
    """
    signing_key = normalize_signing_key(identity.signing_key)
    if kind is Kind.NAVIGATOR and signing_key is not None:
        raise InvalidIdentity("signing key", signing_key, "navigators cannot have a signing key")

    return Identity(
        alias=validate_text("alias", identity.alias),
        name=validate_text("name", identity.name),
        email=validate_email(identity.email),
        signing_key=signing_key,
    )
