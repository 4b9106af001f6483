"""Wire schema for Dink webhook notifications.

The envelope and every ``extra`` shape are pydantic models with camelCase
aliases; see ``envelope`` for the shared metadata and ``extras`` for the
per-type payloads.
"""

from .envelope import ACCOUNT_TYPES, DiscordUser, Envelope, ItemStack, WireModel
from .extras import EXTRA_MODELS, KNOWN_TYPES, EventType, parse_extra

__all__ = [
    "ACCOUNT_TYPES",
    "DiscordUser",
    "Envelope",
    "EventType",
    "EXTRA_MODELS",
    "ItemStack",
    "KNOWN_TYPES",
    "WireModel",
    "parse_extra",
]
