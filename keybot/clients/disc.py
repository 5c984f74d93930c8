"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import discord

from keybot.config import core
from keybot.event_hooks import message_hook, ready_hook

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.message_content = True
intents.dm_messages = True


class KeyBotClient(discord.Client):
    """Discord client that feeds every user message to the command dispatcher."""

    def __init__(self) -> None:
        super().__init__(intents=intents)
        # Populated by ready_hook
        self.dispatcher = None
        self.store = None

    async def close(self) -> None:
        if self.store is not None:
            self.store.close()
            self.store = None
        await super().close()


client = KeyBotClient()


@client.event
async def on_ready() -> None:
    await ready_hook.handle(client)


@client.event
async def on_message(message: discord.Message) -> None:
    await message_hook.handle(client, message)


def run() -> None:
    """Start the Discord bot using configuration from the environment."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_API_TOKEN configured. Cannot run client.")
        return

    try:
        client.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
