"""Key stock commands: ``addkey`` (admin), ``stock`` and ``redeem``."""

from __future__ import annotations

import logging
import sqlite3

from ..registry import command
from ..schema import ArgType, required, variadic
from ..types import CommandContext

logger = logging.getLogger(__name__)


@command(
    "addkey",
    admin=True,
    schema=[required(ArgType.INTEGER, "app_id"), variadic(ArgType.TEXT, "keys")],
)
async def addkey(ctx: CommandContext) -> None:
    app_id, codes = ctx.args
    try:
        added = await ctx.store.keys.add_keys(app_id, codes, ctx.actor_id)
    except sqlite3.Error:
        logger.exception("Failed to stock keys for app %s", app_id)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    logger.info("%s stocked %d key(s) for app %s", ctx.actor_id, added, app_id)
    await ctx.reply(ctx.strings.resolve("addkey.done", added, app_id))


@command("stock")
async def stock(ctx: CommandContext) -> None:
    try:
        rows = await ctx.store.keys.stock()
    except sqlite3.Error:
        logger.exception("Failed to read key stock")
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    if not rows:
        await ctx.reply(ctx.strings.resolve("stock.empty"))
        return
    lines = [ctx.strings.resolve("stock.line", app_id, count) for app_id, count in rows]
    await ctx.reply("\n".join(lines))


@command("redeem", schema=[required(ArgType.INTEGER, "app_id")])
async def redeem(ctx: CommandContext) -> None:
    """Hand out the oldest unredeemed key for the requested app."""
    (app_id,) = ctx.args
    try:
        code = await ctx.store.keys.redeem(app_id, ctx.actor_id)
    except sqlite3.Error:
        logger.exception("Failed to redeem key for app %s", app_id)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return

    if code is None:
        await ctx.reply(ctx.strings.resolve("redeem.none_left", app_id))
        return
    logger.info("%s redeemed a key for app %s", ctx.actor_id, app_id)
    await ctx.reply(ctx.strings.resolve("redeem.done", app_id, code))
