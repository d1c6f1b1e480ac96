"""
Shared path normalization and safety helpers.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def safe_rel_path(value: str | None) -> Path | None:
    """
    Turn a URL tail into a relative path, or None if it escapes its root.

    Rejects NUL bytes, drive letters, absolute paths and `..` segments.
    """
    if value is None:
        return Path("")
    raw = str(value).strip().lstrip("/")
    if raw == "":
        return Path("")
    if "\x00" in raw or "\\" in raw:
        return None
    rel = PurePosixPath(raw)
    if any(part == ".." for part in rel.parts):
        return None
    candidate = Path(*rel.parts)
    if getattr(candidate, "drive", "") or candidate.is_absolute():
        return None
    return candidate


def is_hidden_path(rel: Path) -> bool:
    """True when any segment is a dotfile / dot-directory."""
    return any(part.startswith(".") for part in rel.parts)


def is_within_root(candidate: Path, root: Path) -> bool:
    try:
        root_resolved = root.resolve(strict=True)
        cand_resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return False
    return cand_resolved == root_resolved or cand_resolved.is_relative_to(root_resolved)
