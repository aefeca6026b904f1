"""
Virtual path model: navigation against the current working path.

Paths are absolute, start with "/" and never end with "/" except for the
root itself. Only single-hop ".." is understood; targets such as "a/../b",
"./a" or "a//b" are rejected rather than stored unnormalized.
"""

from enum import Enum
from typing import Union

from webterm.exceptions import (
    AbsolutePathNotAllowedError,
    EmptyTargetError,
    PathResolutionError,
)

ROOT = "/"


class PathSignal(Enum):
    ALREADY_AT_ROOT = "already_at_root"


def join(parent: str, name: str) -> str:
    name = name.strip("/")
    if not name:
        return parent
    return f"/{name}" if parent == ROOT else f"{parent}/{name}"


def parent_of(path: str) -> str:
    parts = [p for p in path.split("/") if p]
    if len(parts) <= 1:
        return ROOT
    return "/" + "/".join(parts[:-1])


def resolve(current: str, target: str) -> Union[str, PathSignal]:
    """Resolve a navigation target against the current working path.

    Args:
        current: The current working path
        target: A single navigation token ("/", "..", ".", or a relative name)

    Returns:
        The new working path, or PathSignal.ALREADY_AT_ROOT for ".." at "/"

    Raises:
        EmptyTargetError: If target is empty
        AbsolutePathNotAllowedError: If target is rooted anywhere but "/"
        PathResolutionError: If a multi-segment target holds ".", ".." or
            empty segments
    """
    if target == "":
        raise EmptyTargetError("Empty navigation target")
    if target.startswith("/"):
        if not target.strip("/"):
            return ROOT
        raise AbsolutePathNotAllowedError(
            f"Absolute paths are not allowed: '{target}' (use 'cd /' then relative names)"
        )
    name = target.rstrip("/")
    if name == "..":
        if current == ROOT:
            return PathSignal.ALREADY_AT_ROOT
        return parent_of(current)
    if name == ".":
        return current
    if any(segment in ("", ".", "..") for segment in name.split("/")):
        raise PathResolutionError(
            f"Unsupported path: '{target}' (move one directory at a time)"
        )
    return join(current, name)