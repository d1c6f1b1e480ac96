"""Shared utilities for the Military Essentials site."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success, request_id_var
from .result import Result
from .time import format_timestamp, uptime_seconds
from .types import AssetKind, Environment, ErrorCode, classify_asset

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "format_timestamp",
    "uptime_seconds",
    "AssetKind",
    "Environment",
    "ErrorCode",
    "classify_asset",
    "sanitize_error_message",
]
