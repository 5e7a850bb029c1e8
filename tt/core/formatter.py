"""Builds the markdown log block that gets spliced into a note after a session stops.

The block is a small table: an optional ``## <section header>`` line, a table
header, and one row holding the local timestamp and the session duration.
Nothing here touches the document or disk; the caller inserts the text.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from tt.util import round_half_up

TABLE_SEPARATOR = "|------|----------|"


@dataclass(frozen=True)
class LogEntry:
    inserted_text: str
    duration: str
    row: str


def format_duration(elapsed_ms):
    """Format milliseconds as HH:MM:SS, going through minutes rounded to one decimal.

    The one-decimal minute step is lossy on purpose (65000 ms -> 1.1 min ->
    00:01:06), so logged durations stay consistent with older log tables.
    """
    minutes = round_half_up(elapsed_ms / 6000) / 10

    hours = math.floor(minutes / 60)
    remaining_minutes = math.floor(minutes % 60)
    remaining_seconds = round_half_up((minutes % 1) * 60)

    return f"{hours:02d}:{remaining_minutes:02d}:{remaining_seconds:02d}"


# Local date and time in the user's locale, e.g. "10/18/26, 14:03:11"
def format_timestamp(now=None):
    now = now or datetime.now()
    return now.strftime("%x, %X")


def build_log_entry(elapsed_ms, existing_text, settings, now=None):
    """Build the text to insert for one finished session.

    If ``## <log_section_header>`` already appears anywhere in
    ``existing_text`` the section line is left out, but a table header is
    always emitted, so repeated sessions in one note each get their own small
    table.
    """
    duration = format_duration(elapsed_ms)
    row = f"| {format_timestamp(now)} | {duration} |\n"

    table_header = f"| {settings.date_header} | {settings.duration_header} |\n{TABLE_SEPARATOR}\n"
    section_header = f"## {settings.log_section_header}"

    if section_header in existing_text:
        block = f"{table_header}{row}"
    else:
        block = f"{section_header}\n\n{table_header}{row}"

    return LogEntry(inserted_text=f"\n\n{block}\n", duration=duration, row=row)
