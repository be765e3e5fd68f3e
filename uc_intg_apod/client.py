"""
NASA APOD client: one request per refresh, tagged parse of the result.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging
import random
import ssl
from datetime import datetime, timedelta
from typing import Any, Optional, Union

import aiohttp
import certifi

from uc_intg_apod.config import Config
from uc_intg_apod.models import (
    PictureRecord,
    ServiceError,
    parse_picture_record,
    parse_service_error,
)

_LOG = logging.getLogger(__name__)

APOD_EPOCH = datetime(2010, 2, 1)
DEMO_KEY = "DEMO_KEY"

ApodResult = Union[PictureRecord, ServiceError]


def random_date(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Pick a random APOD date as ``YYYY-MM-DD``.

    Days are uniform from the epoch up to yesterday in local time, so the
    result is never today.
    """
    now = now or datetime.now()
    rng = rng or random
    end = now.replace(hour=0, minute=0, second=0, microsecond=0)
    days = (end - APOD_EPOCH).days
    offset = min(int(days * rng.random()), days - 1)
    picked = APOD_EPOCH + timedelta(days=offset)
    return picked.strftime("%Y-%m-%d")


class ApodClient:
    """Astronomy Picture of the Day API client."""

    def __init__(self, config: Config, session: Optional[aiohttp.ClientSession] = None):
        """Initialize APOD client."""
        self._config = config
        self._session = session

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    @property
    def apod_url(self) -> str:
        """Get the APOD endpoint URL."""
        return f"https://{self._config.service_host}/planetary/apod"

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context, limit_per_host=2)

            # total=None leaves the request waiting until the transport settles
            timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

            headers = {
                "User-Agent": "Unfolded Circle APOD Integration",
                "Accept": "application/json, text/plain, */*",
            }

            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=headers
            )

            _LOG.info("APOD HTTP session created with SSL verification")

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _get_api_key(self) -> str:
        """Get API key from configuration."""
        return self._config.api_key or DEMO_KEY

    async def fetch_picture(self, date: str) -> ApodResult:
        """
        Fetch the APOD entry for ``date``.

        HTTP failures come back as :class:`ServiceError`. Transport failures
        (``aiohttp.ClientError``, ``asyncio.TimeoutError``) are raised.

        :param date: day to fetch, ``YYYY-MM-DD``
        :return: the picture record, or the error the service reported
        """
        await self._ensure_session()

        params = {"api_key": self._get_api_key(), "date": date}
        _LOG.debug("Fetching APOD for %s", date)

        async with self._session.get(self.apod_url, params=params) as response:
            _LOG.debug("Response: HTTP %s for APOD %s", response.status, date)
            data: Any = None
            try:
                data = await response.json(content_type=None)
            except ValueError as ex:
                _LOG.debug("APOD body for %s is not JSON: %s", date, ex)

            return self._decode(response.ok, response.status, response.reason, data)

    @staticmethod
    def _decode(ok: bool, status: int, reason: Optional[str], data: Any) -> ApodResult:
        """Try record, then error body, then the bare status text."""
        if ok:
            try:
                return parse_picture_record(data)
            except ValueError as ex:
                _LOG.debug("Not a picture record: %s", ex)

        try:
            return parse_service_error(data, status)
        except ValueError:
            return ServiceError(message=reason or "", status=status)
