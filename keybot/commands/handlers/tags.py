from __future__ import annotations

import logging
import sqlite3

from ..registry import command
from ..schema import ArgType, required, variadic
from ..types import CommandContext

logger = logging.getLogger(__name__)

_TAG_SCHEMA = [required(ArgType.TEXT, "actor_id"), variadic(ArgType.TEXT, "tags")]


@command("addtag", admin=True, schema=_TAG_SCHEMA)
async def addtag(ctx: CommandContext) -> None:
    target, tags = ctx.args
    try:
        await ctx.store.profiles.update_tags(target, add=tags)
    except sqlite3.Error:
        logger.exception("Failed to add tags to %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    await ctx.reply(ctx.strings.resolve("addtag.done", len(tags), target))


@command("removetag", admin=True, schema=_TAG_SCHEMA)
async def removetag(ctx: CommandContext) -> None:
    target, tags = ctx.args
    try:
        await ctx.store.profiles.update_tags(target, remove=tags)
    except sqlite3.Error:
        logger.exception("Failed to remove tags from %s", target)
        await ctx.reply(ctx.strings.resolve("dispatch.failure"))
        return
    await ctx.reply(ctx.strings.resolve("removetag.done", len(tags), target))
