from __future__ import annotations

import logging
import sqlite3

from ..registry import command
from ..schema import ArgType, optional, required
from ..types import CommandContext

logger = logging.getLogger(__name__)

MAX_TIER = 3


@command(
    "ban",
    admin=True,
    schema=[required(ArgType.TEXT, "actor_id"), optional(ArgType.INTEGER, "tier")],
)
async def ban(ctx: CommandContext) -> None:
    """
    ``!ban <actor> [tier]``

    Bans ``actor``; when a tier is given it is stored alongside the ban.
    """
    target, tier = ctx.args
    try:
        await ctx.store.profiles.set_banned(target, True, tier=tier)
    except sqlite3.Error:
        logger.exception("Failed to ban %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return

    if tier is None:
        await ctx.reply(ctx.strings.resolve("ban.done", target))
    else:
        await ctx.reply(ctx.strings.resolve("ban.done_tier", target, tier))


@command("unban", admin=True, schema=[required(ArgType.TEXT, "actor_id")])
async def unban(ctx: CommandContext) -> None:
    (target,) = ctx.args
    try:
        await ctx.store.profiles.set_banned(target, False)
    except sqlite3.Error:
        logger.exception("Failed to unban %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    await ctx.reply(ctx.strings.resolve("unban.done", target))


@command(
    "tier",
    admin=True,
    schema=[required(ArgType.TEXT, "actor_id"), required(ArgType.INTEGER, "tier")],
    description_args=[MAX_TIER],
)
async def tier(ctx: CommandContext) -> None:
    target, value = ctx.args
    if not 0 <= value <= MAX_TIER:
        await ctx.reply(ctx.strings.resolve("tier.out_of_range", MAX_TIER))
        return
    try:
        await ctx.store.profiles.set_tier(target, value)
    except sqlite3.Error:
        logger.exception("Failed to set tier for %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    await ctx.reply(ctx.strings.resolve("tier.done", target, value))


@command("printraw", admin=True, schema=[required(ArgType.TEXT, "actor_id")])
async def printraw(ctx: CommandContext) -> None:
    """Dump the stored profile row for an actor."""
    (target,) = ctx.args
    try:
        profile = await ctx.store.profiles.get(target)
    except sqlite3.Error:
        logger.exception("Failed to load profile %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    if profile is None:
        await ctx.reply(ctx.strings.resolve("printraw.missing", target))
        return
    await ctx.reply(repr(profile))
