"""Content source protocol — what upstream transfer/sync code consumes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class ContentSource(Protocol):
    """A single named object with content and metadata.

    ``size`` and ``metadata`` raise on failure; ``etag`` and ``last_mod``
    return empty/zero values instead and never raise.
    """

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def url(self) -> str: ...

    def size(self) -> int: ...

    def etag(self) -> str: ...

    def last_mod(self) -> datetime: ...

    def metadata(self) -> dict[str, Any]: ...

    def open(self) -> BinaryIO: ...
