"""Quick look at an unknown file before full parsing."""

from typing import Optional

from .data_region import parse_row, split_lines
from .diagnostics import DiagnosticSink, emit
from .models import FormatPreview


def preview(content: str, sample_size: int = 10, sink: Optional[DiagnosticSink] = None) -> FormatPreview:
    """
    Characterise a file from its first three non-empty lines.

    The value count of the first data row is reported as is; callers compare
    it with the declared column count as a soft sanity check.

    Args:
        content: Full file content
        sample_size: Number of leading values to keep from the first data row
        sink: Optional diagnostic sink

    Returns:
        FormatPreview, zeroed if the file has fewer than three non-empty lines
    """
    lines = split_lines(content)
    if len(lines) < 3:
        emit(sink, "preview", "too few lines for preview", line_count=len(lines))
        return FormatPreview()

    values = parse_row(lines[2])
    result = FormatPreview(columns=len(values), sample=values[:sample_size], header=lines[0])
    emit(sink, "preview", "format preview", columns=result.columns)
    return result
