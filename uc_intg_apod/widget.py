"""
Astronomy Picture media player: one image surface and one caption surface.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

import ucapi
from ucapi import StatusCodes

from uc_intg_apod.client import ApodClient, random_date
from uc_intg_apod.config import Config
from uc_intg_apod.models import ServiceError

_LOG = logging.getLogger(__name__)

CommandHandler = Callable[[ucapi.Entity, str, dict[str, Any] | None], Awaitable[StatusCodes]]
DisposeCallback = Callable[["PictureWidget"], None]

NOT_AN_IMAGE_CAPTION = "Random APOD was not a image."


class ImageSurface:
    """The picture shown by the widget."""

    def __init__(self):
        self.src = ""
        self.title = ""


class CaptionSurface:
    """The one-line text under the picture."""

    def __init__(self):
        self.text = ""


class PictureWidget(ucapi.MediaPlayer):
    """
    Media player entity showing a random Astronomy Picture of the Day.

    The image and caption surfaces are created once and only their content
    changes on refresh. The entity attributes mirror them for the remote.
    """

    def __init__(
        self,
        config: Config,
        client: ApodClient,
        cmd_handler: CommandHandler | None = None,
    ):
        """Initialize the picture widget."""
        self._client = client
        self._api: Optional[ucapi.IntegrationAPI] = None
        self._disposed = False
        self._dispose_callbacks: List[DisposeCallback] = []

        self.image = ImageSurface()
        self.caption = CaptionSurface()
        self.node: List[Union[ImageSurface, CaptionSurface]] = []
        self.node.append(self.image)
        self.node.append(self.caption)

        features = [
            ucapi.media_player.Features.ON_OFF,
            ucapi.media_player.Features.NEXT,
            ucapi.media_player.Features.MEDIA_IMAGE_URL,
            ucapi.media_player.Features.MEDIA_TITLE,
        ]

        attributes = {
            ucapi.media_player.Attributes.STATE: ucapi.media_player.States.OFF,
            ucapi.media_player.Attributes.MEDIA_IMAGE_URL: self.image.src,
            ucapi.media_player.Attributes.MEDIA_TITLE: self.caption.text,
        }

        super().__init__(
            identifier=config.device_id,
            name=config.device_name,
            features=features,
            attributes=attributes,
            device_class=ucapi.media_player.DeviceClasses.STREAMING_BOX,
            cmd_handler=cmd_handler,
        )

    @property
    def is_disposed(self) -> bool:
        """Whether the host has closed this widget."""
        return self._disposed

    @property
    def is_attached(self) -> bool:
        """Whether the widget is bound to a live integration API."""
        return self._api is not None

    def attach(self, api: ucapi.IntegrationAPI) -> None:
        """Bind the widget to the integration API it is shown through."""
        self._api = api

    def detach(self) -> None:
        """Unbind the widget from its integration API."""
        self._api = None

    def on_dispose(self, callback: DisposeCallback) -> None:
        """Register a callback run once when the widget is disposed."""
        self._dispose_callbacks.append(callback)

    def dispose(self) -> None:
        """Close the widget for good."""
        if self._disposed:
            return

        _LOG.info("Disposing picture widget %s", self.id)
        self.attributes[ucapi.media_player.Attributes.STATE] = ucapi.media_player.States.OFF
        if self._api and self._api.configured_entities.contains(self.id):
            self._api.configured_entities.update_attributes(self.id, self.attributes)

        self._disposed = True
        self.detach()

        callbacks, self._dispose_callbacks = self._dispose_callbacks, []
        for callback in callbacks:
            callback(self)

    async def refresh(self) -> None:
        """
        Fetch a randomly dated APOD entry and render it.

        Service errors and non-image entries end up in the caption. Transport
        failures propagate to the caller.
        """
        date = random_date()
        result = await self._client.fetch_picture(date)

        if isinstance(result, ServiceError):
            _LOG.info("APOD %s failed: HTTP %s %s", date, result.status, result.message)
            self.caption.text = result.message
        elif result.is_image:
            self.image.src = result.url
            self.image.title = result.title
            self.caption.text = result.title
            if result.copyright:
                self.caption.text += f" (Copyright {result.copyright})"
        else:
            _LOG.debug("APOD %s is a %s, keeping previous image", date, result.media_type)
            self.caption.text = NOT_AN_IMAGE_CAPTION

        await self.push_update()

    async def activate(self) -> None:
        """Show the widget as the active view on the remote."""
        self.attributes[ucapi.media_player.Attributes.STATE] = ucapi.media_player.States.ON
        await self.push_update()

    def _render(self) -> None:
        """Copy the surfaces into the entity attributes."""
        self.attributes.update({
            ucapi.media_player.Attributes.MEDIA_IMAGE_URL: self.image.src,
            ucapi.media_player.Attributes.MEDIA_TITLE: self.caption.text,
        })

    async def push_update(self) -> None:
        """Push state update to the remote."""
        self._render()

        if self._disposed or self._api is None:
            return

        if self._api.configured_entities.contains(self.id):
            _LOG.debug("UPDATE: %s -> %s", self.id, self.caption.text)
            self._api.configured_entities.update_attributes(self.id, self.attributes)
