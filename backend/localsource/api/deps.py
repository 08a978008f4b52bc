"""FastAPI dependency injection — item construction under the content root."""

from __future__ import annotations

import logging
import os

from fastapi import HTTPException, Query, status

from localsource.config import settings
from localsource.models import Item

logger = logging.getLogger(__name__)


def _within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def _reject(path: str, detail: str) -> HTTPException:
    logger.warning("Rejected item path %r: %s", path, detail)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def get_item(path: str = Query(..., description="Path relative to the content root")) -> Item:
    """Build the Item for ``path`` under ``settings.root_dir``.

    Rejected with 400: paths holding a NUL character, paths that escape the
    root after normalization, and paths (or sidecars) whose symlinks resolve
    outside the root.
    """
    if "\x00" in path:
        raise _reject(path, "Path contains a NUL character")

    root = settings.root_dir
    full = os.path.normpath(os.path.join(root, path.lstrip("/\\")))
    if not _within(full, root):
        raise _reject(path, "Path escapes the content root")

    real_root = os.path.realpath(root)
    item = Item.under_root(root, full, settings.meta_file_ext)
    for candidate in (full, item.meta_path):
        if candidate and not _within(os.path.realpath(candidate), real_root):
            raise _reject(path, "Path escapes the content root")
    return item
