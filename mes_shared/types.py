"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final, Literal

# Static asset classifications (drive cache policy)
AssetKind = Literal["image", "code", "document", "data", "unknown"]


class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"

    # Storage
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"

    # Server / infrastructure
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL = "INTERNAL"


# File extensions by kind
EXTENSIONS: Final[dict[AssetKind, set[str]]] = {
    "image": {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".ico"},
    "code": {".css", ".js"},
    "document": {".html", ".htm"},
    "data": {".json"},
    "unknown": set(),
}


def classify_asset(filename: str) -> AssetKind:
    """
    Classify a static asset by extension.

    Args:
        filename: File name or URL path

    Returns:
        Asset kind (image, code, document, data, unknown)
    """
    ext = os.path.splitext(filename)[1].lower()

    for kind, exts in EXTENSIONS.items():
        if ext in exts:
            return kind

    return "unknown"


class Environment(str, Enum):
    """Deployment environments understood by the server."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
