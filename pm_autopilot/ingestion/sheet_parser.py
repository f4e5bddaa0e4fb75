"""
Spreadsheet link and CSV parsing.

Turns a shared spreadsheet link into its CSV export URL and the exported CSV
text into feedback entries. Nothing here performs I/O.
"""

from __future__ import annotations

import csv
import io
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from pm_autopilot.core.config import settings
from pm_autopilot.core.exceptions import EmptyResultError, InvalidSourceError
from pm_autopilot.domain.feedback import FeedbackEntry

SPREADSHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")
GID_PATTERN = re.compile(r"gid=(\d+)")


def extract_spreadsheet_id(url: str) -> str:
    """
    Extract the document ID from a spreadsheet link.

    Raises:
        InvalidSourceError: If the link does not address a spreadsheet
    """
    match = SPREADSHEET_ID_PATTERN.search(url or "")
    if not match:
        raise InvalidSourceError(url)
    return match.group(1)


def extract_gid(url: str) -> Optional[str]:
    """Return the sheet tab ``gid`` from the query or fragment, if present."""
    parsed = urlparse(url)
    gids = parse_qs(parsed.query).get("gid")
    if gids:
        return gids[0]
    match = GID_PATTERN.search(parsed.fragment)
    return match.group(1) if match else None


def build_export_url(url: str, export_base_url: Optional[str] = None) -> str:
    """
    Build the CSV export URL for a spreadsheet link.

    Args:
        url: Shared spreadsheet link, e.g. ``.../spreadsheets/d/<id>/edit#gid=0``
        export_base_url: Override for the export host

    Returns:
        ``<base>/<id>/export?format=csv`` with ``&gid=<n>`` when the link has one
    """
    spreadsheet_id = extract_spreadsheet_id(url)
    base = (export_base_url or settings.sheets.export_base_url).rstrip("/")
    export_url = f"{base}/{spreadsheet_id}/export?format=csv"

    gid = extract_gid(url)
    if gid is not None:
        export_url += f"&gid={gid}"
    return export_url


def parse_feedback_csv(
    text: str,
    min_feedback_length: Optional[int] = None,
) -> list[FeedbackEntry]:
    """
    Parse exported CSV text into feedback entries.

    The first row is a header. Column 1 is the date and column 2 the
    feedback text; extra columns are ignored. Rows with fewer than two
    columns, or whose trimmed feedback is shorter than ``min_feedback_length``,
    are skipped. Inside quoted fields both ``""`` and ``\\"`` yield a quote;
    backslashes elsewhere are kept as written.

    Raises:
        EmptyResultError: If no row survives
    """
    if min_feedback_length is None:
        min_feedback_length = settings.sheets.min_feedback_length

    reader = csv.reader(io.StringIO(_normalize_backslash_quotes(text)))
    next(reader, None)

    entries = []
    for row in reader:
        if len(row) < 2:
            continue
        feedback = row[1].strip()
        if len(feedback) < min_feedback_length:
            continue
        entries.append(FeedbackEntry(date=row[0].strip(), feedback=feedback))

    if not entries:
        raise EmptyResultError(
            "No usable feedback rows were found in the spreadsheet",
            details={"min_feedback_length": min_feedback_length},
        )
    return entries


def _normalize_backslash_quotes(text: str) -> str:
    """
    Rewrite ``\\"`` inside quoted fields as ``""`` so the csv module reads it.

    A backslash before the closing quote of a field (the quote is followed by
    a comma, a line break or the end of input) is left alone, as are
    backslashes outside quoted fields.
    """
    out = []
    in_quotes = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if in_quotes:
            if char == '"':
                if text.startswith('""', index):
                    out.append('""')
                    index += 2
                    continue
                in_quotes = False
            elif (
                char == "\\"
                and text.startswith('"', index + 1)
                and text[index + 2 : index + 3] not in ("", ",", "\r", "\n")
            ):
                out.append('""')
                index += 2
                continue
        elif char == '"' and (index == 0 or text[index - 1] in ",\r\n"):
            # Quotes only open a field at its start
            in_quotes = True
        out.append(char)
        index += 1
    return "".join(out)
