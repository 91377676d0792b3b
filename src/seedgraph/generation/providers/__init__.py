"""Column-name value providers (email, phone number, password, person names)."""

from .base import ValueProvider
from .faker_provider import FakerProvider
from .overrides import EmailProvider, PhoneNumberProvider, PasswordProvider
from .registry import OVERRIDES, ColumnOverride, find_override, register_override

__all__ = [
    "ValueProvider",
    "FakerProvider",
    "EmailProvider",
    "PhoneNumberProvider",
    "PasswordProvider",
    "OVERRIDES",
    "ColumnOverride",
    "find_override",
    "register_override",
]
