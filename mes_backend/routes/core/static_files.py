"""
Static asset resolution, content types and cache policy.
"""
from pathlib import Path
from typing import Final

from mes_shared import ErrorCode, Result, classify_asset

from ...path_utils import is_hidden_path, is_within_root, safe_rel_path

MIME_TYPES: Final[dict[str, str]] = {
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}

# Tried in order for extensionless URLs: /about -> about.html, about.htm
FALLBACK_EXTENSIONS: Final[tuple[str, ...]] = (".html", ".htm")

CACHE_IMMUTABLE: Final[str] = "public, max-age=31536000, immutable"
CACHE_WEEK: Final[str] = "public, max-age=604800, must-revalidate"
NO_CACHE_HEADERS: Final[dict[str, str]] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def content_type_for(path: Path) -> str | None:
    return MIME_TYPES.get(path.suffix.lower())


def cache_headers_for(url_path: str) -> dict[str, str]:
    """Cache headers for a request path, keyed on its extension."""
    if url_path == "/":
        return dict(NO_CACHE_HEADERS)
    kind = classify_asset(url_path)
    if kind == "image":
        return {"Cache-Control": CACHE_IMMUTABLE}
    if kind == "code":
        return {"Cache-Control": CACHE_WEEK}
    if kind == "document":
        return dict(NO_CACHE_HEADERS)
    return {}


def resolve_asset(root: Path, url_tail: str) -> Result[Path]:
    """
    Map a URL tail onto a file below `root`.

    Dotfiles are ignored, directories have no index, and extensionless names
    fall back to `.html` / `.htm`.
    """
    rel = safe_rel_path(url_tail)
    if rel is None:
        return Result.Err(ErrorCode.FORBIDDEN, "Path escapes the static root")
    if rel == Path("") or is_hidden_path(rel):
        return Result.Err(ErrorCode.NOT_FOUND, "Not found")

    candidates = [root / rel]
    if not rel.suffix:
        candidates.extend(root / rel.with_name(rel.name + ext) for ext in FALLBACK_EXTENSIONS)

    for candidate in candidates:
        if candidate.is_file() and is_within_root(candidate, root):
            return Result.Ok(candidate)
    return Result.Err(ErrorCode.NOT_FOUND, "Not found")
