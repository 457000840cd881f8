"""
Contact field validation.

Runs before any external call. Inputs are expected trimmed
(ContactFields.normalized()).
"""

import re
from dataclasses import dataclass
from typing import Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .models import ContactFields

MAX_EMAIL_LENGTH = 254
MAX_NAME_LENGTH = 100
MAX_URL_LENGTH = 2000

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MSG_REQUIRED = "Tous les champs sont requis."
MSG_NAME_TOO_LONG = "Le nom et le prénom ne doivent pas dépasser 100 caractères."
MSG_EMAIL_TOO_LONG = "L'adresse email est trop longue."
MSG_EMAIL_INVALID = "Le format de l'adresse email est invalide."
MSG_URL_TOO_LONG = "L'URL est trop longue."
MSG_URL_INVALID = "Le format de l'URL est invalide."

_url_adapter = TypeAdapter(AnyUrl)


@dataclass
class FieldError:
    field: str
    message: str


def is_absolute_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_contact_fields(contact: ContactFields) -> Optional[FieldError]:
    """
    First problem found in the contact fields, or None.

    Checks, in order: required fields, name lengths, email length and shape,
    url length and format (url is optional).
    """
    for name in ("email", "first_name", "last_name"):
        if not getattr(contact, name):
            return FieldError(name, MSG_REQUIRED)

    if len(contact.first_name) > MAX_NAME_LENGTH:
        return FieldError("first_name", MSG_NAME_TOO_LONG)
    if len(contact.last_name) > MAX_NAME_LENGTH:
        return FieldError("last_name", MSG_NAME_TOO_LONG)

    if len(contact.email) > MAX_EMAIL_LENGTH:
        return FieldError("email", MSG_EMAIL_TOO_LONG)
    if not EMAIL_PATTERN.match(contact.email):
        return FieldError("email", MSG_EMAIL_INVALID)

    if contact.url:
        if len(contact.url) > MAX_URL_LENGTH:
            return FieldError("url", MSG_URL_TOO_LONG)
        if not is_absolute_url(contact.url):
            return FieldError("url", MSG_URL_INVALID)

    return None
