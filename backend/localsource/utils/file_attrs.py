"""Filesystem attributes — base metadata keys and their derivation from lstat."""

from __future__ import annotations

import os
import stat
from typing import Any

# Metadata keys exposed by a local Item
METADATA_PATH = "path"
METADATA_IS_DIR = "is_dir"
METADATA_DIR = "dir"
METADATA_NAME = "name"
METADATA_MODE = "mode"
METADATA_MODE_D = "mode_d"
METADATA_PERM = "perm"
METADATA_INODE = "inode"
METADATA_SIZE = "size"
METADATA_IS_HARDLINK = "is_hardlink"
METADATA_IS_SYMLINK = "is_symlink"
METADATA_LINK = "link"
METADATA_USER = "user_data"

META_FILE_EXT = "._meta"


def file_metadata(path: str, info: os.stat_result) -> dict[str, Any]:
    """Build the base metadata mapping for ``path`` from its lstat result.

    Symlinks are described as links: ``link`` holds the raw target string
    and is only present when ``is_symlink`` is true.
    """
    clean = os.path.normpath(path)
    is_symlink = stat.S_ISLNK(info.st_mode)

    metadata: dict[str, Any] = {
        METADATA_PATH: clean,
        METADATA_IS_DIR: stat.S_ISDIR(info.st_mode),
        METADATA_DIR: os.path.dirname(clean) or ".",
        METADATA_NAME: os.path.basename(clean),
        METADATA_MODE: format(info.st_mode, "o"),
        METADATA_MODE_D: str(info.st_mode),
        METADATA_PERM: stat.filemode(info.st_mode),
        METADATA_INODE: info.st_ino,
        METADATA_SIZE: info.st_size,
        METADATA_IS_HARDLINK: info.st_nlink > 1,
        METADATA_IS_SYMLINK: is_symlink,
    }
    if is_symlink:
        metadata[METADATA_LINK] = os.readlink(path)
    return metadata


def sidecar_path_for(path: str, ext: str = META_FILE_EXT) -> str:
    """Conventional sidecar path for ``path``, or "" when no such file exists."""
    candidate = path + ext
    return candidate if os.path.isfile(candidate) else ""
