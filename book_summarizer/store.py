"""
Persistence module for the book summarizer.
Writes chapter summaries to a Supabase table through its REST (PostgREST) API.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .config import SUPABASE_URL, SUPABASE_KEY, SUPABASE_TABLE, SUPABASE_TIMEOUT
from .exceptions import APIKeyError, ConfigurationError, PersistenceError, StartupConnectivityError
from .metrics import record_summary_stored, time_store_write
from .models import ChapterSummary, SummaryRecord

# Set up logging
logger = logging.getLogger(__name__)


def create_supabase_client(
    url: Optional[str] = SUPABASE_URL,
    key: Optional[str] = SUPABASE_KEY,
    timeout: Optional[float] = SUPABASE_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create an HTTP client bound to the Supabase REST endpoint.

    Args:
        url: Supabase project URL
        key: Supabase API key
        timeout: Request timeout in seconds, None to wait indefinitely
        transport: Transport override, used by tests

    Returns:
        An httpx client with the Supabase auth headers set

    Raises:
        ConfigurationError: If the URL is missing
        APIKeyError: If the key is missing
    """
    if not url:
        raise ConfigurationError("SUPABASE_URL not found in environment variables")
    if not key:
        raise APIKeyError("SUPABASE_KEY not found in environment variables")

    return httpx.Client(
        base_url=f"{url.rstrip('/')}/rest/v1",
        headers={
            "apikey": key,
            "Authorization": f"Bearer {key}",
        },
        timeout=timeout,
        transport=transport,
    )


class SummaryStore:
    """Insert-only access to the summaries table."""

    def __init__(self, client: httpx.Client, table: str = SUPABASE_TABLE):
        self.client = client
        self.table = table

    def check_connection(self) -> None:
        """
        Read at most one row to verify the table is reachable.

        Raises:
            StartupConnectivityError: If the request fails or is rejected
        """
        try:
            response = self.client.get(f"/{self.table}", params={"select": "*", "limit": 1})
        except httpx.HTTPError as e:
            raise StartupConnectivityError(f"Supabase is unreachable: {str(e)}") from e

        if response.is_error:
            raise StartupConnectivityError(
                f"Supabase rejected the connection check with status {response.status_code}: {response.text}"
            )
        logger.info("Supabase connected successfully")

    @time_store_write()
    def insert_summary(self, chapter_number: int, summary: ChapterSummary) -> Dict[str, Any]:
        """
        Insert one row for a chapter. Existing rows are never updated.

        Args:
            chapter_number: 1-based chapter position
            summary: The evaluation returned by the LLM

        Returns:
            The row that was written

        Raises:
            PersistenceError: If the request fails or is rejected
        """
        row = SummaryRecord.from_summary(chapter_number, summary).model_dump()
        try:
            response = self.client.post(
                f"/{self.table}",
                json=[row],
                headers={"Prefer": "return=minimal"},
            )
        except httpx.HTTPError as e:
            raise PersistenceError(f"Supabase insert failed: {str(e)}") from e

        if response.is_error:
            raise PersistenceError(
                f"Supabase rejected the insert with status {response.status_code}: {response.text}"
            )

        record_summary_stored()
        logger.debug(f"Stored summary for chapter {chapter_number} in {self.table}")
        return row

    def close(self) -> None:
        self.client.close()


def build_store(client: Optional[httpx.Client] = None) -> SummaryStore:
    """Build the summary store from configuration, creating the HTTP client unless one is given."""
    return SummaryStore(client if client is not None else create_supabase_client())
