"""Commands that fan a message out to other users."""

from __future__ import annotations

import logging
import sqlite3

from ..registry import command
from ..schema import ArgType, variadic
from ..types import CommandContext

logger = logging.getLogger(__name__)


@command("broadcast", admin=True, schema=[variadic(ArgType.TEXT, "words")])
async def broadcast(ctx: CommandContext) -> None:
    """Send the words to every non-banned known user, the sender excluded."""
    (words,) = ctx.args
    if not words:
        await ctx.reply(ctx.strings.resolve("broadcast.empty"))
        return

    try:
        known = await ctx.store.profiles.list_actor_ids()
    except sqlite3.Error:
        logger.exception("Failed to list broadcast recipients")
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return

    text = " ".join(words)
    recipients = [actor for actor in known if actor != ctx.actor_id]
    for actor in recipients:
        await ctx.messenger.send(actor, text)

    logger.info("%s broadcast to %d user(s)", ctx.actor_id, len(recipients))
    await ctx.reply(ctx.strings.resolve("broadcast.done", len(recipients)))


@command("contact", schema=[variadic(ArgType.TEXT, "words")])
async def contact(ctx: CommandContext) -> None:
    """Relay a message to every admin on the allow-list."""
    (words,) = ctx.args
    if not words:
        await ctx.reply(ctx.strings.resolve("contact.empty"))
        return
    if not ctx.settings.admin_ids:
        logger.warning("contact from %s dropped: no admins configured", ctx.actor_id)
        await ctx.reply(ctx.strings.resolve("contact.no_admins"))
        return

    relay = ctx.strings.resolve("contact.relay", ctx.actor_id, " ".join(words))
    for admin_id in sorted(ctx.settings.admin_ids):
        await ctx.messenger.send(admin_id, relay)
    await ctx.reply(ctx.strings.resolve("contact.done"))
