"""
Setup flow for the Astronomy Picture integration.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp
import ucapi

from uc_intg_apod.client import DEMO_KEY, ApodClient, random_date
from uc_intg_apod.config import Config
from uc_intg_apod.models import ServiceError

_LOG = logging.getLogger(__name__)


class ApodSetup:
    """Driver setup handler: records the API key and checks it once."""

    def __init__(
        self,
        config: Config,
        client: ApodClient,
        setup_complete_callback: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        """Initialize setup handler."""
        self._config = config
        self._client = client
        self._setup_complete_callback = setup_complete_callback

    async def setup_handler(self, driver_setup_request: ucapi.SetupDriver) -> ucapi.SetupAction:
        """
        Handle driver setup requests.

        :param driver_setup_request: setup request from Remote Two
        :return: setup action response
        """
        _LOG.debug("Setup handler called: %s", type(driver_setup_request).__name__)

        if isinstance(driver_setup_request, ucapi.DriverSetupRequest):
            return await self._handle_settings(driver_setup_request.setup_data)
        elif isinstance(driver_setup_request, ucapi.UserDataResponse):
            return await self._handle_settings(driver_setup_request.input_values)
        elif isinstance(driver_setup_request, ucapi.AbortDriverSetup):
            _LOG.debug("Setup aborted: %s", driver_setup_request.error)
            return ucapi.SetupError(driver_setup_request.error)
        else:
            _LOG.error("Unknown setup request type: %s", type(driver_setup_request))
            return ucapi.SetupError(ucapi.IntegrationSetupError.OTHER)

    async def _handle_settings(self, values: Optional[Dict[str, Any]]) -> ucapi.SetupAction:
        """Save the submitted key, then validate it unless forced."""
        if not values or "api_key" not in values:
            return self._request_api_key(self._config.api_key)

        api_key = str(values.get("api_key") or "").strip()
        force_setup = values.get("force_setup") in (True, "true", "True")

        self._config.update({"api_key": api_key})

        if not force_setup:
            error = await self._test_connection()
            if error:
                _LOG.warning("APOD validation failed: %s", error)
                return self._request_api_key(api_key, error)
        else:
            _LOG.info("Setup forced by user - skipping APOD validation")

        if self._setup_complete_callback:
            await self._setup_complete_callback()
        return ucapi.SetupComplete()

    async def _test_connection(self) -> Optional[str]:
        """Make one APOD request, returning an error message on failure."""
        try:
            result = await self._client.fetch_picture(random_date())
        except (aiohttp.ClientError, asyncio.TimeoutError) as ex:
            return f"Cannot reach NASA API: {ex}"

        if isinstance(result, ServiceError):
            return result.message or f"HTTP {result.status}"
        return None

    @staticmethod
    def _request_api_key(api_key: str, error: Optional[str] = None) -> ucapi.RequestUserInput:
        """Build the API key form, with the force option after a failure."""
        label = "NASA API Key (leave empty to use DEMO_KEY)"
        if error:
            label = f"{error}\n\nTry a different API key or force setup:"

        settings = [
            {
                "id": "api_key",
                "label": {"en": label},
                "field": {"text": {"value": api_key if api_key != DEMO_KEY else "", "placeholder": "Get free key at api.nasa.gov"}},
            }
        ]
        if error:
            settings.append({
                "id": "force_setup",
                "label": {"en": "Force setup completion (ignore API errors)"},
                "field": {"checkbox": {"value": False}},
            })

        return ucapi.RequestUserInput(
            title="Astronomy Picture Configuration",
            settings=settings
        )
