"""
Log Service Module

Paging, searching and incremental tailing of Jenkins console logs.

The paging and search functions are pure and operate on already-fetched
text; LogService fetches the text through the Jenkins client.
"""

import re
from typing import List, Optional

from loguru import logger

from jenkins_mcp.clients.jenkins_client import JenkinsClient
from jenkins_mcp.core.constants import (
    DEFAULT_LOG_LIMIT,
    DEFAULT_SEARCH_MATCHES,
    HEADER_MORE_DATA,
    HEADER_TEXT_SIZE,
    MAX_CONTEXT_LINES,
    MAX_LOG_LINES,
    MAX_SEARCH_MATCHES,
)
from jenkins_mcp.core.exceptions import InvalidPatternError
from jenkins_mcp.models.responses import LogWindow, ProgressiveLog, SearchMatch, SearchResult
from jenkins_mcp.utils import build_path


def split_log_lines(text: str) -> List[str]:
    """
    Split console text into lines.

    A single trailing empty element produced by a final newline is dropped.

    Example:
        >>> split_log_lines("a\\nb\\n")
        ['a', 'b']
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def paginate_log(text: str, skip: Optional[int] = None, limit: int = DEFAULT_LOG_LIMIT) -> LogWindow:
    """
    Select a window of lines from console text.

    Args:
        text: Raw console text
        skip: Lines to skip from the start; negative counts back from the end
        limit: Window size (sign ignored, capped at MAX_LOG_LINES)

    Returns:
        LogWindow with start_line <= end_line <= total_lines

    Example:
        >>> window = paginate_log("1\\n2\\n3\\n4\\n5", skip=-2, limit=2)
        >>> window.lines
        ['2', '3']
    """
    lines = split_log_lines(text)
    total = len(lines)
    effective_limit = min(abs(limit), MAX_LOG_LINES)

    if skip is not None and skip < 0:
        end = max(0, total + skip)
        start = max(0, end - effective_limit)
    else:
        start = min(skip or 0, total)
        end = min(total, start + effective_limit)

    return LogWindow(
        lines=lines[start:end],
        total_lines=total,
        start_line=start,
        end_line=end,
        has_more_content=end < total
    )


def compile_search_pattern(pattern: str, use_regex: bool = False, ignore_case: bool = False) -> "re.Pattern[str]":
    """
    Compile a search pattern.

    Raises:
        InvalidPatternError: If use_regex is set and the pattern does not compile
    """
    flags = re.IGNORECASE if ignore_case else 0
    source = pattern if use_regex else re.escape(pattern)

    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InvalidPatternError(f"Invalid regular expression '{pattern}': {e}", pattern=pattern) from e


def search_log(
    text: str,
    pattern: str,
    use_regex: bool = False,
    ignore_case: bool = False,
    max_matches: int = DEFAULT_SEARCH_MATCHES,
    context_lines: int = 0
) -> SearchResult:
    """
    Search console text line by line.

    Every line is scanned so match_count is the true total; only the first
    max_matches matches are returned, each with up to context_lines lines of
    context on either side (clipped at the log boundaries).

    Args:
        text: Raw console text
        pattern: Literal text, or a regular expression when use_regex is set
        use_regex: Treat pattern as a regular expression
        ignore_case: Case-insensitive matching
        max_matches: Matches to return (clamped to 1..MAX_SEARCH_MATCHES)
        context_lines: Context lines per side (clamped to 0..MAX_CONTEXT_LINES)

    Returns:
        SearchResult

    Raises:
        InvalidPatternError: Invalid regular expression
    """
    regex = compile_search_pattern(pattern, use_regex, ignore_case)
    max_matches = max(1, min(max_matches, MAX_SEARCH_MATCHES))
    context_lines = max(0, min(context_lines, MAX_CONTEXT_LINES))

    lines = split_log_lines(text)
    total = len(lines)
    matches: List[SearchMatch] = []
    match_count = 0

    for index, line in enumerate(lines):
        if not regex.search(line):
            continue

        match_count += 1
        if len(matches) < max_matches:
            matches.append(SearchMatch(
                line_number=index + 1,
                line=line,
                context_before=lines[max(0, index - context_lines):index],
                context_after=lines[index + 1:min(total, index + context_lines + 1)]
            ))

    return SearchResult(
        pattern=pattern,
        use_regex=use_regex,
        ignore_case=ignore_case,
        match_count=match_count,
        has_more_matches=match_count > len(matches),
        total_lines=total,
        matches=matches
    )


class LogService:
    """
    Service for build log operations.

    Example:
        >>> log_service = LogService(client)
        >>> window = await log_service.get_build_log("folder/myJob", 42, skip=-50, limit=50)
    """

    def __init__(self, client: JenkinsClient):
        """Initialize log service."""
        self.client = client

    async def get_build_log(
        self,
        job_full_name: str,
        build_number: Optional[int] = None,
        skip: Optional[int] = None,
        limit: int = DEFAULT_LOG_LIMIT
    ) -> LogWindow:
        """
        Get a window of lines from a build's console output.

        Raises:
            ResourceNotFoundError: Job or build does not exist
        """
        logger.debug(f"getBuildLog: {job_full_name}#{build_number or 'last'}, skip={skip}, limit={limit}")

        text = await self.client.get_text(f"{build_path(job_full_name, build_number)}/consoleText")
        return paginate_log(text, skip=skip, limit=limit)

    async def search_build_log(
        self,
        job_full_name: str,
        pattern: str,
        build_number: Optional[int] = None,
        use_regex: bool = False,
        ignore_case: bool = False,
        max_matches: int = DEFAULT_SEARCH_MATCHES,
        context_lines: int = 0
    ) -> SearchResult:
        """
        Search a build's console output for a pattern.

        The pattern is validated before anything is fetched.

        Raises:
            InvalidPatternError: Invalid regular expression
            ResourceNotFoundError: Job or build does not exist
        """
        logger.debug(f"searchBuildLog: {job_full_name}#{build_number or 'last'}, pattern={pattern!r}")

        compile_search_pattern(pattern, use_regex, ignore_case)
        text = await self.client.get_text(f"{build_path(job_full_name, build_number)}/consoleText")

        return search_log(
            text,
            pattern,
            use_regex=use_regex,
            ignore_case=ignore_case,
            max_matches=max_matches,
            context_lines=context_lines
        )

    async def get_progressive_build_log(
        self,
        job_full_name: str,
        build_number: Optional[int] = None,
        start: int = 0
    ) -> ProgressiveLog:
        """
        Fetch console output from a byte offset.

        Pass next_byte_offset from the previous result as start to continue;
        more_data is False once the build has finished writing its log.
        """
        logger.debug(f"getProgressiveBuildLog: {job_full_name}#{build_number or 'last'}, start={start}")

        path = f"{build_path(job_full_name, build_number)}/logText/progressiveText"
        text, headers = await self.client.get_text_with_headers(path, {"start": start})

        text_size = headers.get(HEADER_TEXT_SIZE)
        try:
            next_offset = int(text_size) if text_size is not None else None
        except ValueError:
            next_offset = None
        if next_offset is None:
            next_offset = start + len(text.encode("utf-8"))

        return ProgressiveLog(
            text=text,
            next_byte_offset=next_offset,
            more_data=headers.get(HEADER_MORE_DATA, "").lower() == "true"
        )
