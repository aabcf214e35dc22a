"""Locating the numeric data block inside a sensor log."""

import math
import re
from typing import List, Optional

from .diagnostics import DiagnosticSink, emit
from .models import DataRegion

SENTINEL_MARKER = "#16"

# Leading numeric prefix, the way a lenient float reader consumes "1.5e3abc"
NUMBER_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
INFINITY_RE = re.compile(r"[+-]?Infinity")


def split_lines(content: str) -> List[str]:
    """Split content into lines, dropping blank ones."""
    return [line for line in content.splitlines() if line.strip()]


def parse_number(token: str) -> float:
    """
    Parse the numeric prefix of a token.

    Args:
        token: Whitespace-free text token

    Returns:
        Parsed value, or NaN if the token does not start with a number
    """
    token = token.strip()
    match = NUMBER_PREFIX_RE.match(token)
    if match:
        return float(match.group(0))
    if INFINITY_RE.match(token):
        return float('-inf') if token.startswith('-') else float('inf')
    return math.nan


def parse_row(line: str) -> List[float]:
    """Split a data line on whitespace runs and parse every token."""
    return [parse_number(token) for token in line.split()]


def is_data_line(line: str) -> bool:
    """True for non-comment lines whose first token is a finite number."""
    if not line.strip() or line.startswith('#'):
        return False
    tokens = line.split()
    return bool(tokens) and math.isfinite(parse_number(tokens[0]))


def find_data_end(lines: List[str], sentinel: str = SENTINEL_MARKER) -> int:
    """Index of the first sentinel line, or ``len(lines)`` if there is none."""
    for i, line in enumerate(lines):
        if line.strip().startswith(sentinel):
            return i
    return len(lines)


def locate_data_region(
    lines: List[str],
    header_lines: int = 2,
    sentinel: str = SENTINEL_MARKER,
    sink: Optional[DiagnosticSink] = None,
) -> DataRegion:
    """
    Find where numeric data starts and where the trailing labels begin.

    Args:
        lines: Non-empty lines of the file
        header_lines: Number of fixed header lines to skip before scanning
        sentinel: Marker that terminates the data block
        sink: Optional diagnostic sink

    Returns:
        DataRegion with ``end_line`` exclusive. When no data line precedes
        the sentinel, the region is empty (``start_line == end_line``).
    """
    end_line = find_data_end(lines, sentinel)
    start_line = end_line
    for i in range(header_lines, end_line):
        if is_data_line(lines[i]):
            start_line = i
            break

    region = DataRegion(start_line=start_line, end_line=end_line)
    if region.is_empty:
        emit(sink, "region", "no data found before sentinel", end_line=end_line)
    else:
        emit(
            sink, "region", "data region located",
            start_line=start_line,
            end_line=end_line,
            sentinel_found=end_line < len(lines),
        )
    return region
