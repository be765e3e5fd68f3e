#!/usr/bin/env python3
"""
Astronomy Picture integration driver.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""
import asyncio
import logging
import os
import signal
from typing import Optional

import ucapi

from uc_intg_apod.client import ApodClient
from uc_intg_apod.commands import OpenPictureCommand
from uc_intg_apod.config import Config
from uc_intg_apod.setup import ApodSetup
from uc_intg_apod.shell import EntityShell

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)8s | %(name)s | %(message)s"
)
logging.getLogger("aiohttp").setLevel(logging.WARNING)

_LOG = logging.getLogger(__name__)

loop = asyncio.new_event_loop()
asyncio.set_event_loop(loop)
api: Optional[ucapi.IntegrationAPI] = None
apod_client: Optional[ApodClient] = None
apod_config: Optional[Config] = None
open_command: Optional[OpenPictureCommand] = None


async def on_setup_complete():
    """Callback executed when driver setup is complete."""
    global open_command
    _LOG.info("Setup complete. Creating entities...")

    if not api or not apod_client:
        _LOG.error("Cannot create entities: API or client not initialized.")
        return

    if open_command is None:
        open_command = OpenPictureCommand(apod_config, apod_client, EntityShell(api))

    widget = open_command.register()
    _LOG.info(f"Picture widget entity available: {widget.id}")
    await api.set_device_state(ucapi.DeviceStates.CONNECTED)


async def on_r2_connect():
    """Handle Remote connection."""
    _LOG.info("Remote connected.")
    if api and open_command:
        await api.set_device_state(ucapi.DeviceStates.CONNECTED)
    else:
        _LOG.info("Integration not configured yet.")


async def on_disconnect():
    """Handle Remote disconnection."""
    _LOG.info("Remote disconnected.")


async def on_subscribe_entities(entity_ids: list[str]):
    """Handle entity subscription."""
    _LOG.info(f"Entities subscribed: {entity_ids}")

    if not open_command:
        return

    widget = open_command.register()
    if widget.id in entity_ids:
        await widget.push_update()


async def on_unsubscribe_entities(entity_ids: list[str]):
    """Handle entity unsubscription: the picture view was closed."""
    _LOG.info(f"Remote unsubscribed from entities: {entity_ids}")

    if open_command and open_command.widget and open_command.widget.id in entity_ids:
        open_command.dispose_widget()


async def init_integration():
    """Initialize the integration objects and API."""
    global api, apod_client, apod_config

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    driver_json_path = os.path.join(project_root, "driver.json")

    if not os.path.exists(driver_json_path):
        driver_json_path = "driver.json"
        if not os.path.exists(driver_json_path):
            _LOG.error(f"Cannot find driver.json at {driver_json_path}")
            raise FileNotFoundError("driver.json not found")

    _LOG.info(f"Using driver.json from: {driver_json_path}")

    api = ucapi.IntegrationAPI(loop)

    config_path = os.path.join(api.config_dir_path, "config.json")
    _LOG.info(f"Using config file: {config_path}")
    apod_config = Config(config_path)

    apod_client = ApodClient(apod_config)

    setup_handler = ApodSetup(apod_config, apod_client, on_setup_complete)

    await api.init(driver_json_path, setup_handler.setup_handler)

    api.add_listener(ucapi.Events.CONNECT, on_r2_connect)
    api.add_listener(ucapi.Events.DISCONNECT, on_disconnect)
    api.add_listener(ucapi.Events.SUBSCRIBE_ENTITIES, on_subscribe_entities)
    api.add_listener(ucapi.Events.UNSUBSCRIBE_ENTITIES, on_unsubscribe_entities)

    _LOG.info("Integration API initialized successfully")


async def main():
    """Main entry point."""
    _LOG.info("Starting Astronomy Picture Integration Driver")

    try:
        await init_integration()

        if apod_config and os.path.exists(os.path.join(api.config_dir_path, "config.json")):
            _LOG.info("Integration is already configured")
            await on_setup_complete()
        else:
            _LOG.warning("Integration is not configured. Waiting for setup...")

    except Exception as e:
        _LOG.error(f"Failed to start integration: {e}", exc_info=True)
        if api:
            await api.set_device_state(ucapi.DeviceStates.ERROR)
        raise


def shutdown_handler(signum, frame):
    """Handle termination signals for graceful shutdown."""
    _LOG.warning(f"Received signal {signum}. Shutting down...")

    async def cleanup():
        try:
            if open_command:
                open_command.dispose_widget()

            if apod_client:
                _LOG.info("Closing APOD client...")
                await apod_client.close()

            tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            _LOG.info("Stopping event loop...")
            loop.stop()

    loop.create_task(cleanup())


def run() -> None:
    """Run the driver until stopped."""
    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    try:
        loop.run_until_complete(main())
        loop.run_forever()
    except (KeyboardInterrupt, asyncio.CancelledError):
        _LOG.info("Driver stopped.")
    finally:
        if not loop.is_closed():
            _LOG.info("Closing event loop...")
            loop.close()


if __name__ == "__main__":
    run()
