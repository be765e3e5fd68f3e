"""
Tests for the open-picture command and the entity shell.
"""

import unittest
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import ucapi
from ucapi import StatusCodes

from uc_intg_apod.commands import OpenPictureCommand
from uc_intg_apod.config import Config
from uc_intg_apod.models import PictureRecord
from uc_intg_apod.shell import EntityShell
from uc_intg_apod.widget import PictureWidget
from fakes import FakeApi

COMMANDS = ucapi.media_player.Commands
ATTRS = ucapi.media_player.Attributes


class TestOpenPictureCommand(unittest.IsolatedAsyncioTestCase):
    """Test widget creation, reuse and refresh from the command."""

    def setUp(self):
        self.api = FakeApi()
        self.config = Config("/nonexistent/apod/config.json")
        self.client = MagicMock()
        self.client.fetch_picture = AsyncMock(
            return_value=PictureRecord(date="2015-03-04", title="T", url="X", media_type="image")
        )
        self.shell = EntityShell(self.api)
        self.command = OpenPictureCommand(self.config, self.client, self.shell)

    async def test_execute_creates_attaches_and_refreshes(self):
        """Test the first run shows a fresh widget."""
        self.assertIsNone(self.command.widget)

        await self.command.execute()

        widget = self.command.widget
        self.assertIsInstance(widget, PictureWidget)
        self.assertIs(self.api.available_entities.get(widget.id), widget)
        self.assertTrue(self.shell.is_attached(widget))
        self.assertEqual(widget.attributes[ATTRS.STATE], ucapi.media_player.States.ON)
        self.assertEqual(widget.caption.text, "T")
        self.client.fetch_picture.assert_awaited_once()

    async def test_execute_reuses_live_widget(self):
        """Test later runs refresh the same widget."""
        await self.command.execute()
        first = self.command.widget

        await self.command.execute()

        self.assertIs(self.command.widget, first)
        self.assertEqual(self.client.fetch_picture.await_count, 2)

    async def test_execute_after_dispose_creates_new_widget(self):
        """Test a disposed widget is never reused."""
        await self.command.execute()
        first = self.command.widget

        self.command.dispose_widget()
        self.assertIsNone(self.command.widget)

        await self.command.execute()

        second = self.command.widget
        self.assertIsNot(second, first)
        self.assertFalse(second.is_disposed)
        self.assertIs(self.api.available_entities.get(second.id), second)

    async def test_replaces_subscribed_entity(self):
        """Test a new widget takes over the remote's subscription."""
        first = self.command.register()
        self.api.configured_entities.add(first)
        self.command.dispose_widget()

        await self.command.execute()

        second = self.command.widget
        self.assertIs(self.api.configured_entities.get(second.id), second)
        self.assertEqual(self.api.configured_entities.updates[-1][1][ATTRS.MEDIA_TITLE], "T")

    def test_register_does_not_fetch(self):
        """Test registering only attaches the widget."""
        widget = self.command.register()

        self.assertTrue(self.shell.is_attached(widget))
        self.client.fetch_picture.assert_not_called()

    def test_dispose_without_widget(self):
        """Test disposing with nothing open is a no-op."""
        self.command.dispose_widget()
        self.assertIsNone(self.command.widget)

    async def test_execute_propagates_transport_failure(self):
        """Test transport failures reach the caller."""
        self.client.fetch_picture.side_effect = aiohttp.ClientConnectionError("down")

        with self.assertRaises(aiohttp.ClientConnectionError):
            await self.command.execute()


class TestEntityCommands(unittest.IsolatedAsyncioTestCase):
    """Test the remote's media player commands."""

    def setUp(self):
        self.api = FakeApi()
        self.client = MagicMock()
        self.client.fetch_picture = AsyncMock(
            return_value=PictureRecord(date="2015-03-04", title="T", url="X", media_type="image")
        )
        self.command = OpenPictureCommand(
            Config("/nonexistent/apod/config.json"), self.client, EntityShell(self.api)
        )
        self.widget = self.command.register()

    async def test_on_and_next_refresh(self):
        """Test ON and NEXT show a new picture."""
        for cmd_id in (COMMANDS.ON, COMMANDS.NEXT):
            status = await self.command.handle_entity_command(self.widget, cmd_id)
            self.assertEqual(status, StatusCodes.OK)
        self.assertEqual(self.client.fetch_picture.await_count, 2)

    async def test_off_disposes(self):
        """Test OFF closes the widget."""
        status = await self.command.handle_entity_command(self.widget, COMMANDS.OFF)

        self.assertEqual(status, StatusCodes.OK)
        self.assertTrue(self.widget.is_disposed)
        self.assertIsNone(self.command.widget)

    async def test_on_after_off_reopens(self):
        """Test ON on the closed entity opens a fresh widget."""
        await self.command.handle_entity_command(self.widget, COMMANDS.OFF)

        status = await self.command.handle_entity_command(self.widget, COMMANDS.ON)

        self.assertEqual(status, StatusCodes.OK)
        self.assertIsNot(self.command.widget, self.widget)

    async def test_ignored_command(self):
        """Test unused media commands are acknowledged."""
        status = await self.command.handle_entity_command(self.widget, COMMANDS.PLAY_PAUSE)

        self.assertEqual(status, StatusCodes.OK)
        self.client.fetch_picture.assert_not_called()

    async def test_unknown_command(self):
        """Test unsupported commands are reported."""
        status = await self.command.handle_entity_command(self.widget, "launch_rocket")

        self.assertEqual(status, StatusCodes.NOT_IMPLEMENTED)

    async def test_transport_failure_is_server_error(self):
        """Test failures at the remote boundary map to SERVER_ERROR."""
        self.client.fetch_picture.side_effect = aiohttp.ClientConnectionError("down")

        status = await self.command.handle_entity_command(self.widget, COMMANDS.NEXT)

        self.assertEqual(status, StatusCodes.SERVER_ERROR)

    async def test_widget_routes_commands_to_command(self):
        """Test widgets carry the command's handler."""
        status = await self.widget.command(COMMANDS.NEXT, websocket=None)

        self.assertEqual(status, StatusCodes.OK)
        self.client.fetch_picture.assert_awaited_once()
