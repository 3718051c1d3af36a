#!/usr/bin/env python3
# Copyright (c) 2025 [Harivatsa G A]. All rights reserved.
# This work is licensed under CC BY-NC-ND 4.0.
# https://creativecommons.org/licenses/by-nc-nd/4.0/
# Attribution required. Commercial use and modifications prohibited.
"""
Path Utilities for Jenkins MCP Server

Builds Jenkins URL paths and query strings from tool parameters.
"""

from typing import Any, Mapping, Optional
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a single URL component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def job_full_name_to_path(job_full_name: str) -> str:
    """
    Convert a job full name to its Jenkins URL path.

    Empty segments (leading, trailing or doubled slashes) are ignored.

    Args:
        job_full_name: Job full name such as "folder/subfolder/myJob"

    Returns:
        Path such as "/job/folder/job/subfolder/job/myJob"

    Example:
        >>> job_full_name_to_path("my folder/my job")
        '/job/my%20folder/job/my%20job'
    """
    parts = [p for p in job_full_name.split("/") if p]
    return "".join(f"/job/{encode_uri_component(p)}" for p in parts)


def build_path(job_full_name: str, build_number: Optional[int] = None) -> str:
    """
    Get the path of a specific build, or of the last build.

    Example:
        >>> build_path("myJob", 42)
        '/job/myJob/42'
        >>> build_path("myJob")
        '/job/myJob/lastBuild'
    """
    suffix = f"/{build_number}" if build_number else "/lastBuild"
    return f"{job_full_name_to_path(job_full_name)}{suffix}"


def describe_build(job_full_name: str, build_number: Optional[int] = None) -> str:
    """Human-readable build identifier used in not-found messages."""
    if build_number:
        return f"{job_full_name}#{build_number}"
    return f"{job_full_name} (last build)"


def _format_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Build a query string from key-value pairs.

    None values are skipped and booleans are rendered as true/false.

    Returns:
        "?k=v&..." or an empty string when nothing remains

    Example:
        >>> build_query_string({"tree": "name,color", "depth": 1, "x": None})
        '?tree=name%2Ccolor&depth=1'
    """
    if not params:
        return ""

    parts = [
        f"{encode_uri_component(str(key))}={encode_uri_component(_format_query_value(value))}"
        for key, value in params.items()
        if value is not None
    ]
    return f"?{'&'.join(parts)}" if parts else ""
