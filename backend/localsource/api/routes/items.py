"""Item routes — resolved metadata and content streaming for local items."""

from __future__ import annotations

import hashlib
import json
import logging
from email.utils import format_datetime
from typing import BinaryIO, Iterator, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import StreamingResponse

from localsource.api.deps import get_item
from localsource.models import ZERO_TIME, Item, SidecarDecodeError
from localsource.schemas.items import ItemInfo

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 64 * 1024  # 64 KB


def _raise_http(item: Item, exc: Exception) -> NoReturn:
    """Translate an item error into the matching HTTP error."""
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
        code, detail = status.HTTP_404_NOT_FOUND, "Item not found"
    elif isinstance(exc, PermissionError):
        code, detail = status.HTTP_403_FORBIDDEN, "Permission denied"
    elif isinstance(exc, IsADirectoryError):
        code, detail = status.HTTP_400_BAD_REQUEST, "Item is a directory"
    elif isinstance(exc, (json.JSONDecodeError, SidecarDecodeError)):
        code, detail = 422, f"Invalid sidecar metadata: {exc}"
    elif isinstance(exc, ValueError):
        code, detail = status.HTTP_400_BAD_REQUEST, "Invalid item path"
    else:
        raise exc
    logger.info("Item %s: %s (%s)", item.name, detail, exc)
    raise HTTPException(status_code=code, detail=detail) from exc


def _http_etag(etag: str) -> str:
    """Quoted entity tag for an item etag (header-safe)."""
    return '"' + hashlib.sha256(etag.encode("utf-8")).hexdigest()[:32] + '"'


def _etag_matches(if_none_match: str, etag: str) -> bool:
    """Weak comparison of an If-None-Match header against ``etag``."""
    for tag in if_none_match.split(","):
        tag = tag.strip()
        if tag == "*" or tag.removeprefix("W/") == etag:
            return True
    return False


def _iter_file(f: BinaryIO) -> Iterator[bytes]:
    with f:
        while chunk := f.read(CHUNK_SIZE):
            yield chunk


@router.get("/info", response_model=ItemInfo)
def item_info(item: Item = Depends(get_item)):
    """Item identity, size and merged filesystem + sidecar metadata."""
    try:
        metadata = item.metadata()
        size = item.size()
    except (OSError, ValueError) as e:
        _raise_http(item, e)

    modified = item.last_mod()
    return ItemInfo(
        id=item.id,
        name=item.name,
        url=item.url,
        size=size,
        etag=item.etag(),
        last_modified=modified if modified != ZERO_TIME else None,
        metadata=metadata,
    )


@router.get("/content")
def item_content(request: Request, item: Item = Depends(get_item)):
    """Stream item bytes; honours If-None-Match against the item etag."""
    headers: dict[str, str] = {}

    etag = item.etag()
    if etag:
        headers["ETag"] = _http_etag(etag)
        if _etag_matches(request.headers.get("if-none-match", ""), headers["ETag"]):
            return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    modified = item.last_mod()
    if modified != ZERO_TIME:
        headers["Last-Modified"] = format_datetime(modified, usegmt=True)

    try:
        f = item.open()
    except (OSError, ValueError) as e:
        _raise_http(item, e)

    return StreamingResponse(
        _iter_file(f),
        media_type="application/octet-stream",
        headers=headers,
    )
