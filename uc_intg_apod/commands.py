"""
The "open random astronomy picture" command.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging
from typing import Any, Optional

import ucapi
from ucapi import StatusCodes

from uc_intg_apod.client import ApodClient
from uc_intg_apod.config import Config
from uc_intg_apod.shell import EntityShell
from uc_intg_apod.widget import PictureWidget

_LOG = logging.getLogger(__name__)

SUPPRESS_MEDIA_COMMANDS = [
    ucapi.media_player.Commands.PLAY_PAUSE,
    ucapi.media_player.Commands.STOP,
    ucapi.media_player.Commands.PREVIOUS,
    ucapi.media_player.Commands.SHUFFLE,
    ucapi.media_player.Commands.REPEAT,
    ucapi.media_player.Commands.MUTE_TOGGLE,
    ucapi.media_player.Commands.VOLUME_UP,
    ucapi.media_player.Commands.VOLUME_DOWN,
]


class OpenPictureCommand:
    """Owns the picture widget handle and opens or refreshes it on demand."""

    def __init__(self, config: Config, client: ApodClient, shell: EntityShell):
        """Initialize the command."""
        self._config = config
        self._client = client
        self._shell = shell
        self._widget: Optional[PictureWidget] = None

    @property
    def widget(self) -> Optional[PictureWidget]:
        """The live widget, if any."""
        return self._widget

    def _new_widget(self) -> PictureWidget:
        """Create a widget whose disposal clears this command's handle."""
        widget = PictureWidget(self._config, self._client, cmd_handler=self.handle_entity_command)
        widget.on_dispose(self._forget)
        return widget

    def _forget(self, widget: PictureWidget) -> None:
        if self._widget is widget:
            self._widget = None

    def register(self) -> PictureWidget:
        """Ensure a live widget is attached to the shell, without fetching."""
        if self._widget is None or self._widget.is_disposed:
            self._widget = self._new_widget()

        widget = self._widget
        if not self._shell.is_attached(widget):
            self._shell.add(widget)
        return widget

    async def execute(self) -> None:
        """Ensure a live widget is shown and active, then refresh it."""
        widget = self.register()
        await self._shell.activate_by_id(widget.id)
        await widget.refresh()

    def dispose_widget(self) -> None:
        """Close the current widget, if one is open."""
        if self._widget is not None:
            self._widget.dispose()

    async def handle_entity_command(
        self, entity: ucapi.Entity, cmd_id: str, params: dict[str, Any] | None = None
    ) -> StatusCodes:
        """Handle media player commands from the remote."""
        _LOG.debug("COMMAND: %s on %s", cmd_id, entity.id)

        try:
            if cmd_id in (ucapi.media_player.Commands.ON, ucapi.media_player.Commands.NEXT):
                await self.execute()
                return StatusCodes.OK
            elif cmd_id == ucapi.media_player.Commands.OFF:
                self.dispose_widget()
                return StatusCodes.OK
            elif cmd_id in SUPPRESS_MEDIA_COMMANDS:
                _LOG.debug("Ignoring command '%s'", cmd_id)
                return StatusCodes.OK
            else:
                _LOG.warning("Unexpected command: %s", cmd_id)
                return StatusCodes.NOT_IMPLEMENTED

        except Exception as ex:
            _LOG.error("Error handling command %s: %s", cmd_id, ex)
            return StatusCodes.SERVER_ERROR
