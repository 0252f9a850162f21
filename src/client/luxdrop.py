"""Affiliate API client.

Issues the single ``GET <api_url>?codes=...&startDate=...&endDate=...`` call
the leaderboard needs and returns the decoded JSON body untouched; shape
handling lives in :mod:`src.processor.ingestion`.

Usage::

    from src.client.luxdrop import AffiliateClient

    client = AffiliateClient(api_key, base_url=config.api_url)
    body = client.fetch_affiliates(["Colby"], "2025-10-01", "2025-10-31")
"""

import logging

import requests

from src.schema.models import DEFAULT_API_URL

from .errors import (
    HTTPError,
    LeaderboardError,
    ResponseParseError,
    TransportError,
)

logger = logging.getLogger(__name__)


class AffiliateClient:
    """Thin wrapper around the affiliate statistics endpoint.

    Parameters
    ----------
    api_key : str
        Sent as the ``x-api-key`` header.
    base_url : str
        Endpoint URL, without query string.
    timeout : float
        Seconds to wait for the server; a timeout is a transport failure.
    session : requests.Session, optional
        Reused for every request when given.
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_API_URL,
                 timeout: float = 30.0,
                 session: requests.Session | None = None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "x-api-key": api_key,
            "Content-Type": "application/json",
        }

    def _get(self, url, params=None):
        """Make GET request and decode the JSON body."""
        try:
            r = self.session.get(url, headers=self.headers, params=params,
                                 timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise TransportError(f"Failed to fetch {url}: {exc}") from exc
        except requests.RequestException as exc:
            logger.error("Request to %s could not be sent: %s", url, exc)
            raise LeaderboardError(f"Request to {url} failed: {exc}") from exc

        if not 200 <= r.status_code < 300:
            logger.error("Request to %s returned %d: %s",
                         url, r.status_code, r.text[:500])
            raise HTTPError(r.status_code)

        try:
            return r.json()
        except ValueError as exc:
            raise ResponseParseError(f"Response from {url} is not JSON") from exc

    def fetch_affiliates(self, codes, start_date=None, end_date=None):
        """Fetch statistics for *codes* over an optional date range."""
        params = {"codes": ",".join(codes)}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date

        logger.info("Fetching affiliates %s (%s to %s)",
                    params["codes"], start_date or "-", end_date or "-")
        return self._get(self.base_url, params=params)
