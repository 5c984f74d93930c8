import logging

import discord

from keybot.clients.messenger import DiscordMessenger
from keybot.commands import create_dispatcher
from keybot.config import core, dispatch, store as store_cfg
from keybot.memory import Store
from keybot.strings import Strings

logger = logging.getLogger(__name__)


async def handle(client: discord.Client):
    """Open the store and build the command dispatcher on client ready."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")

    if getattr(client, "dispatcher", None) is not None:
        # on_ready fires again after reconnects; the registry is built once
        return

    strings = Strings.load(core.LANGUAGE_FILE or None)
    store = Store.open(store_cfg.SQL_DB_PATH)
    settings = dispatch.settings()

    client.store = store
    client.dispatcher = create_dispatcher(
        settings, DiscordMessenger(client), strings, store
    )
    logger.info(
        "Dispatcher ready (delimiter %r, %d admin(s))",
        settings.delimiter,
        len(settings.admin_ids),
    )
