"""Mapping between virtual paths and a directory on the local disk.

The local backend stores the virtual tree under a root directory; nothing may
resolve outside of it.
"""

from __future__ import annotations

import os
from typing import Tuple


def normalize_root(root: str) -> str:
    s = os.path.expanduser(str(root or "").strip()) or os.getcwd()
    return os.path.realpath(os.path.abspath(s))


def ensure_within_root(root: str, abs_path: str) -> Tuple[bool, str]:
    """Return (ok, normalized_abs) telling whether abs_path stays under root."""
    p = os.path.realpath(os.path.abspath(abs_path))
    try:
        common = os.path.commonpath([root, p])
    except ValueError:
        return False, p
    return common == root, p


def to_local_path(root: str, virtual_path: str) -> str:
    """Translate an absolute virtual path into a path under root.

    Raises:
        ValueError: If the virtual path escapes the root
    """
    parts = [p for p in virtual_path.split("/") if p]
    ok, local = ensure_within_root(root, os.path.join(root, *parts))
    if not ok:
        raise ValueError(f"Path escapes the storage root: {virtual_path}")
    return local
