import pytest

from keybot.commands.registry import CommandRegistry, CommandSpec
from keybot.commands.router import CommandRouter
from keybot.commands.schema import ArgType, optional, required
from keybot.commands.types import RouteOutcome

ADMIN = "1"
USER = "2"


class HandlerSpy:
    def __init__(self):
        self.calls = []

    async def __call__(self, ctx):
        self.calls.append(ctx)


@pytest.fixture
def spies():
    return {"ban": HandlerSpy(), "unban": HandlerSpy(), "stock": HandlerSpy()}


@pytest.fixture
def router(spies, settings, messenger, strings):
    registry = CommandRegistry(
        [
            CommandSpec(
                "ban",
                spies["ban"],
                (required(ArgType.TEXT), optional(ArgType.INTEGER)),
                admin=True,
                description="Ban",
            ),
            CommandSpec("unban", spies["unban"], (required(ArgType.TEXT),), admin=True, description="Unban"),
            CommandSpec("stock", spies["stock"], (), description="Stock"),
        ]
    )
    return CommandRouter(registry, settings, messenger, strings)


@pytest.mark.asyncio
async def test_help_for_regular_user(router, messenger):
    outcome = await router.route("help", USER, [])
    assert outcome is RouteOutcome.HELP
    assert messenger.sent == [(USER, router.registry.help_text)]
    assert messenger.sent[0][1] == "!stock -> Stock"


@pytest.mark.asyncio
async def test_help_for_admin(router, messenger):
    await router.route("help", ADMIN, [])
    assert messenger.sent == [(ADMIN, router.registry.admin_help_text)]
    assert "!ban <text> <integer?> -> Ban" in messenger.sent[0][1]


@pytest.mark.asyncio
async def test_admin_command_refused_for_regular_user(router, spies, messenger, strings):
    outcome = await router.route("ban", USER, ["123456"])
    assert outcome is RouteOutcome.ADMIN_ONLY
    assert spies["ban"].calls == []
    assert messenger.sent == [(USER, strings.resolve("dispatch.admin_only"))]


@pytest.mark.asyncio
async def test_invalid_usage_checked_before_authorization(router, spies, messenger, strings):
    outcome = await router.route("ban", USER, [])
    assert outcome is RouteOutcome.INVALID_USAGE
    assert messenger.sent == [(USER, strings.resolve("dispatch.invalid_usage"))]

    messenger.sent.clear()
    outcome = await router.route("ban", ADMIN, ["123456", "seven"])
    assert outcome is RouteOutcome.INVALID_USAGE
    assert spies["ban"].calls == []
    assert len(messenger.sent) == 1


@pytest.mark.asyncio
async def test_admin_dispatch_passes_context(router, spies, messenger):
    outcome = await router.route("ban", ADMIN, ["123456", "7"])
    assert outcome is RouteOutcome.DISPATCHED
    (ctx,) = spies["ban"].calls
    assert ctx.actor_id == ADMIN
    assert ctx.tokens == ["123456", "7"]
    assert ctx.args == ["123456", 7]
    assert ctx.is_admin is True
    assert ctx.registry is router.registry
    assert messenger.sent == []


@pytest.mark.asyncio
async def test_regular_command_dispatches_for_anyone(router, spies):
    assert await router.route("stock", USER, ["ignored"]) is RouteOutcome.DISPATCHED
    assert spies["stock"].calls[0].is_admin is False


@pytest.mark.asyncio
async def test_unknown_identifier_suggests(router, messenger):
    outcome = await router.route("bam", USER, [])
    assert outcome is RouteOutcome.SUGGESTED
    (actor, text) = messenger.sent[0]
    assert actor == USER
    assert "✔ !ban" in text.splitlines()


@pytest.mark.asyncio
async def test_unknown_identifier_without_match_is_silent(router, messenger):
    outcome = await router.route("hello", USER, [])
    assert outcome is RouteOutcome.UNRESOLVED
    assert messenger.sent == []
