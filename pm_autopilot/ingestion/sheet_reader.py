"""
Spreadsheet CSV export reader.
"""

from __future__ import annotations

from typing import Optional

import httpx

from pm_autopilot.core.config import settings
from pm_autopilot.core.exceptions import AccessDeniedError, SpreadsheetFetchError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.feedback import FeedbackEntry
from pm_autopilot.ingestion.sheet_parser import build_export_url, parse_feedback_csv

logger = get_logger(__name__)

HTML_MARKERS = ("<html", "<!doctype")


class SheetReader:
    """
    Fetches a shared spreadsheet as CSV and parses it into feedback entries.

    One GET per read, no retries. Private sheets answer with a 4xx status or
    with a sign-in page; both surface as ``AccessDeniedError``.
    """

    def __init__(
        self,
        timeout: Optional[int] = None,
        export_base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the reader.

        Args:
            timeout: Request timeout in seconds
            export_base_url: Override for the export host
            transport: Custom httpx transport (used by tests)
        """
        self.timeout = timeout or settings.sheets.timeout
        self.export_base_url = export_base_url or settings.sheets.export_base_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_csv(self, spreadsheet_url: str) -> str:
        """
        Download the CSV export of a spreadsheet link.

        Raises:
            InvalidSourceError: If the link is not a spreadsheet link
            AccessDeniedError: If the sheet is not publicly readable
            SpreadsheetFetchError: On server errors or network failure
        """
        export_url = build_export_url(spreadsheet_url, self.export_base_url)
        client = await self._get_client()

        try:
            response = await client.get(export_url)
        except httpx.RequestError as e:
            logger.error("Spreadsheet request error", url=export_url, error=str(e))
            raise SpreadsheetFetchError(
                f"Request failed: {e}", details={"url": export_url}
            ) from e

        if 400 <= response.status_code < 500:
            logger.warning(
                "Spreadsheet access denied", url=export_url, status_code=response.status_code
            )
            raise AccessDeniedError(
                f"The spreadsheet could not be read (HTTP {response.status_code})"
            )
        if response.status_code >= 500:
            logger.error(
                "Spreadsheet export failed", url=export_url, status_code=response.status_code
            )
            raise SpreadsheetFetchError(
                f"HTTP {response.status_code}",
                details={"url": export_url, "status_code": response.status_code},
            )

        text = response.text
        if self._is_markup(response, text):
            logger.warning("Spreadsheet returned a web page instead of CSV", url=export_url)
            raise AccessDeniedError("The spreadsheet is not publicly shared")

        return text

    async def read(self, spreadsheet_url: str) -> list[FeedbackEntry]:
        """
        Fetch and parse a spreadsheet into feedback entries.

        Raises:
            EmptyResultError: If no usable rows remain after filtering
        """
        text = await self.fetch_csv(spreadsheet_url)
        entries = parse_feedback_csv(text)
        logger.info("Spreadsheet parsed", url=spreadsheet_url, rows=len(entries))
        return entries

    @staticmethod
    def _is_markup(response: httpx.Response, text: str) -> bool:
        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type:
            return True
        head = text[:1024].lower()
        return any(marker in head for marker in HTML_MARKERS)
