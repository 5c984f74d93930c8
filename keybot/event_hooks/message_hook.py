import logging

import discord

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, message: discord.Message):
    """Forward user messages to the command dispatcher."""

    author = message.author
    if author is None or getattr(author, "bot", False):
        return
    if client.user is not None and author.id == client.user.id:
        return

    dispatcher = getattr(client, "dispatcher", None)
    if dispatcher is None:
        logger.debug("Dispatcher not ready; dropping message %s", message.id)
        return

    await dispatcher.on_message(str(author.id), message.content or "")
