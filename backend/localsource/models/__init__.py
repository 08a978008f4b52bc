"""Content-source models for local filesystem items."""

from localsource.models.item import ZERO_TIME, Item, SidecarDecodeError
from localsource.models.source import ContentSource

__all__ = [
    "ContentSource",
    "Item",
    "SidecarDecodeError",
    "ZERO_TIME",
]
