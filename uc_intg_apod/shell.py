"""
Host shell adapter: shows picture widgets through the integration API.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import logging

import ucapi

from uc_intg_apod.widget import PictureWidget

_LOG = logging.getLogger(__name__)


class EntityShell:
    """Attaches widgets to the remote's entity collections."""

    def __init__(self, api: ucapi.IntegrationAPI):
        """Initialize the shell over an integration API."""
        self._api = api

    def add(self, widget: PictureWidget) -> None:
        """Attach a widget, replacing any stale entity with the same id."""
        for entities in (self._api.available_entities, self._api.configured_entities):
            if entities.contains(widget.id):
                entities.remove(widget.id)
                entities.add(widget)

        if not self._api.available_entities.contains(widget.id):
            self._api.available_entities.add(widget)
        widget.attach(self._api)
        _LOG.info("Added picture widget entity: %s", widget.id)

    def is_attached(self, widget: PictureWidget) -> bool:
        """Whether the widget is live in this shell."""
        return widget.is_attached and self._api.available_entities.contains(widget.id)

    async def activate_by_id(self, entity_id: str) -> None:
        """Make the widget with ``entity_id`` the active view."""
        widget = self._api.available_entities.get(entity_id)
        if not isinstance(widget, PictureWidget):
            _LOG.warning("No picture widget to activate: %s", entity_id)
            return
        await widget.activate()
