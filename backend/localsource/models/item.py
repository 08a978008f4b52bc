"""Local filesystem Item — lazily resolved stat + sidecar metadata."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

from localsource.utils.file_attrs import (
    META_FILE_EXT,
    METADATA_USER,
    file_metadata,
    sidecar_path_for,
)
from localsource.utils.once import Once

logger = logging.getLogger(__name__)

ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


class SidecarDecodeError(ValueError):
    """Sidecar file decoded to valid JSON that is not an object."""

    def __init__(self, meta_path: str, value: Any):
        super().__init__(
            f"sidecar {meta_path!r} must hold a JSON object, got {type(value).__name__}"
        )
        self.meta_path = meta_path


@dataclass(frozen=True)
class _Resolved:
    info: os.stat_result
    metadata: dict[str, Any]


class Item:
    """A single file or directory exposed as a content source.

    Construction does no I/O. The first call to ``size``, ``etag``,
    ``last_mod`` or ``metadata`` stats the path (without following a final
    symlink) and reads the optional sidecar; that happens once per Item and
    the outcome, success or error, is kept for the Item's lifetime.

    ``size`` and ``metadata`` raise the resolution error. ``etag`` and
    ``last_mod`` are best effort and return "" / ``ZERO_TIME`` instead.
    """

    def __init__(self, path: str, meta_path: str = "", name_prefix_len: int = 0):
        self._path = path
        self._meta_path = meta_path
        self._name_prefix_len = name_prefix_len
        self._resolution: Once[_Resolved] = Once(self._resolve)

    @classmethod
    def under_root(cls, root: str, path: str, meta_ext: str = META_FILE_EXT) -> Item:
        """Item for ``path`` named relative to ``root``, with its sidecar if present."""
        prefix_len = len(root.rstrip(os.sep)) + len(os.sep)
        return cls(path, sidecar_path_for(path, meta_ext), prefix_len)

    def __repr__(self) -> str:
        return f"<Item(path='{self._path}', meta_path='{self._meta_path}')>"

    # --- Identity ---

    @property
    def id(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._path[self._name_prefix_len:].replace(os.sep, "/")

    @property
    def url(self) -> str:
        return Path(os.path.abspath(self._path)).as_uri()

    @property
    def meta_path(self) -> str:
        return self._meta_path

    # --- Strict accessors ---

    def size(self) -> int:
        return self._resolution.get().info.st_size

    def metadata(self) -> dict[str, Any]:
        return dict(self._resolution.get().metadata)

    # --- Best-effort accessors ---

    def etag(self) -> str:
        modified = self._mod_time()
        return str(modified) if modified is not None else ""

    def last_mod(self) -> datetime:
        modified = self._mod_time()
        return modified if modified is not None else ZERO_TIME

    def _mod_time(self) -> datetime | None:
        try:
            info = self._resolution.get().info
        except Exception as e:
            logger.debug("No modification time for %s: %s", self._path, e)
            return None
        return datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)

    # --- Content ---

    def open(self) -> BinaryIO:
        """Open the file for reading. Each call returns a new handle."""
        return open(self._path, "rb")

    # --- Resolution ---

    def _resolve(self) -> _Resolved:
        logger.debug("Resolving %s", self._path)
        try:
            info = os.lstat(self._path)
            metadata = file_metadata(self._path, info)
            user_data = self._read_sidecar()
        except Exception as e:
            logger.debug("Resolution failed for %s: %s", self._path, e)
            raise
        if user_data:
            metadata[METADATA_USER] = user_data
        return _Resolved(info=info, metadata=metadata)

    def _read_sidecar(self) -> dict[str, Any] | None:
        if not self._meta_path:
            return None
        with open(self._meta_path, "rb") as f:
            data = json.loads(f.read())
        if data is None:
            return None
        if not isinstance(data, dict):
            raise SidecarDecodeError(self._meta_path, data)
        return data
