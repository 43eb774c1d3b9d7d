"""Filename and sub-path validation.

The character grammar is an allow-list, not a traversal blacklist: ``..``
inside a value (``a/../b``) passes it. Containment is a separate check,
applied when the upload path policy is ``strict``.
"""

from __future__ import annotations

import re
from pathlib import Path

# ascii letters, digits, underscore, dash, dot, tilde, slash
_SEGMENT_RE = re.compile(r"[A-Za-z0-9_.~/-]+")


def is_valid_segment(segment: str) -> bool:
    """Check a filename or sub-path against the allow-list grammar.

    Rejects the empty string, anything starting with ``.`` and anything
    containing a character outside ``[A-Za-z0-9_.~/-]``.
    """
    if not segment:
        return False
    if segment[0] == ".":
        return False
    return _SEGMENT_RE.fullmatch(segment) is not None


def split_relative(value: str) -> list[str]:
    """Split a slash-separated value into path parts.

    Empty parts are dropped, so leading, trailing and doubled slashes never
    produce an absolute path when joined under a root.
    """
    return [part for part in value.split("/") if part]


def join_under(root: Path, value: str) -> Path:
    """Append ``value`` to ``root`` lexically, without resolving ``..``."""
    return root.joinpath(*split_relative(value))


def is_contained(root: Path, candidate: Path, *, allow_root: bool = False) -> bool:
    """Check that ``candidate`` stays inside ``root`` after canonicalization.

    Both paths are resolved, so ``..`` parts and symlinks in the existing
    prefix are followed before comparing.
    """
    resolved_root = root.resolve()
    resolved = candidate.resolve()
    if resolved == resolved_root:
        return allow_root
    return resolved_root in resolved.parents
