"""Item schemas — resolved view of a local content source."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ItemInfo(BaseModel):
    """Identity, size and merged metadata of one item."""
    id: str
    name: str
    url: str
    size: int
    etag: str = ""
    last_modified: datetime | None = None
    metadata: dict[str, Any]
