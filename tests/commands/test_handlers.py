import sqlite3

import pytest

from keybot.commands import create_dispatcher
from keybot.commands.types import DispatchSettings, RouteOutcome
from keybot.memory import Store

ADMIN = "1"
USER = "2"


@pytest.fixture
def store():
    store = Store.open(":memory:")
    yield store
    store.close()


@pytest.fixture
def dispatcher(settings, messenger, strings, store):
    return create_dispatcher(settings, messenger, strings, store)


@pytest.mark.asyncio
async def test_ban_with_tier_then_banned_user_is_rejected(dispatcher, store, messenger, strings):
    assert await dispatcher.on_message(ADMIN, "!ban 123456 3") is RouteOutcome.DISPATCHED
    assert messenger.texts_for(ADMIN) == [strings.resolve("ban.done_tier", "123456", 3)]

    profile = await store.profiles.get("123456")
    assert profile.banned and profile.tier == 3

    messenger.sent.clear()
    assert await dispatcher.on_message("123456", "!stock") is None
    assert messenger.sent == [("123456", "You are banned.")]


@pytest.mark.asyncio
async def test_unban(dispatcher, store, messenger):
    await store.profiles.set_banned("55", True)
    await dispatcher.on_message(ADMIN, "!unban 55")
    assert (await store.profiles.get("55")).banned is False
    assert messenger.texts_for(ADMIN) == ["Unbanned 55"]


@pytest.mark.asyncio
async def test_ban_refused_for_regular_user(dispatcher, store, messenger):
    assert await dispatcher.on_message(USER, "!ban 123456") is RouteOutcome.ADMIN_ONLY
    assert await store.profiles.get("123456") is None
    assert messenger.texts_for(USER) == ["This command is for admins only!"]


@pytest.mark.asyncio
async def test_tier_range_checked(dispatcher, store, messenger):
    await dispatcher.on_message(ADMIN, "!tier 77 9")
    assert messenger.texts_for(ADMIN) == ["Tier must be between 0 and 3"]
    assert await store.profiles.get("77") is None

    await dispatcher.on_message(ADMIN, "!tier 77 2")
    assert (await store.profiles.get("77")).tier == 2


@pytest.mark.asyncio
async def test_addtag_and_removetag(dispatcher, store, messenger):
    await dispatcher.on_message(ADMIN, "!addtag 77 vip, early, beta")
    assert (await store.profiles.get("77")).tags == ["vip", "early", "beta"]

    await dispatcher.on_message(ADMIN, "!removetag 77 early beta")
    assert (await store.profiles.get("77")).tags == ["vip"]
    assert messenger.texts_for(ADMIN) == ["Added 3 tags to 77", "Revoked 2 tags from 77"]


@pytest.mark.asyncio
async def test_addkey_stock_redeem_flow(dispatcher, messenger):
    await dispatcher.on_message(ADMIN, "!addkey 730 AAA-1 BBB-2")
    assert messenger.texts_for(ADMIN) == ["Added 2 keys for app 730"]

    await dispatcher.on_message(USER, "!stock")
    await dispatcher.on_message(USER, "!redeem 730")
    await dispatcher.on_message(USER, "!redeem 999")
    assert messenger.texts_for(USER) == [
        "App 730: 2 left",
        "Your key for app 730: AAA-1",
        "No keys left for app 999",
    ]


@pytest.mark.asyncio
async def test_redeem_requires_integer(dispatcher, messenger):
    assert await dispatcher.on_message(USER, "!redeem abc") is RouteOutcome.INVALID_USAGE
    assert messenger.texts_for(USER) == ["Invalid Usage!"]


@pytest.mark.asyncio
async def test_broadcast_reaches_known_unbanned_users(dispatcher, store, messenger):
    for actor in ("10", "11", "12"):
        await store.get_or_create_profile(actor)
    await store.profiles.set_banned("12", True)

    await dispatcher.on_message(ADMIN, "!broadcast server restart soon")

    assert messenger.texts_for("10") == ["server restart soon"]
    assert messenger.texts_for("11") == ["server restart soon"]
    assert messenger.texts_for("12") == []
    assert messenger.texts_for(ADMIN) == ["Broadcast sent to 2 users"]


@pytest.mark.asyncio
async def test_contact_relays_to_admins(dispatcher, messenger):
    await dispatcher.on_message(USER, "!contact my key does not work")
    assert messenger.texts_for(ADMIN) == ["Message from 2: my key does not work"]
    assert messenger.texts_for(USER) == ["Your message was sent to the admins."]


@pytest.mark.asyncio
async def test_printraw(dispatcher, messenger):
    await dispatcher.on_message(ADMIN, "!printraw 404")
    assert messenger.texts_for(ADMIN) == ["No profile stored for 404"]
    await dispatcher.on_message(ADMIN, "!printraw 1")
    assert "actor_id='1'" in messenger.texts_for(ADMIN)[-1]


@pytest.mark.asyncio
async def test_store_failure_is_logged_and_reported(dispatcher, store, messenger, monkeypatch, caplog):
    async def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(store.profiles, "set_banned", broken)

    await dispatcher.on_message(ADMIN, "!ban 5")

    assert messenger.texts_for(ADMIN) == ["Something went wrong, please try again later."]
    assert "Failed to ban 5" in caplog.text


@pytest.mark.asyncio
async def test_help_lists_builtin_commands(dispatcher, messenger):
    await dispatcher.on_message(USER, "!help")
    await dispatcher.on_message(ADMIN, "!help")
    user_help = messenger.texts_for(USER)[0]
    admin_help = messenger.texts_for(ADMIN)[0]
    assert "!redeem <integer> -> Claim a key for an app" in user_help
    assert "!ban" not in user_help
    assert "!addtag <text> [arg1, arg2, ...] -> Add one or more tags to a user" in admin_help
    assert "!redeem" not in admin_help
    assert admin_help.splitlines()[0].startswith("!ban <text> <integer?> -> ")


async def _locked(*args, **kwargs):
    raise sqlite3.OperationalError("database is locked")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "repo, method, actor, text, logged",
    [
        ("keys", "stock", USER, "!stock", "Failed to read key stock"),
        ("profiles", "get", ADMIN, "!printraw 5", "Failed to load profile 5"),
        ("profiles", "list_actor_ids", ADMIN, "!broadcast hello all", "Failed to list broadcast recipients"),
    ],
)
async def test_read_failures_are_logged_and_reported(
    dispatcher, store, messenger, monkeypatch, caplog, repo, method, actor, text, logged
):
    monkeypatch.setattr(getattr(store, repo), method, _locked)

    assert await dispatcher.on_message(actor, text) is RouteOutcome.DISPATCHED

    assert messenger.texts_for(actor) == ["Something went wrong, please try again later."]
    assert logged in caplog.text


@pytest.mark.asyncio
async def test_ban_with_tier_is_all_or_nothing(dispatcher, store, messenger):
    store.conn.execute(
        """
        CREATE TRIGGER reject_top_tier BEFORE UPDATE OF tier ON profiles
        WHEN NEW.tier = 3
        BEGIN SELECT RAISE(ABORT, 'tier locked'); END;
        """
    )

    await dispatcher.on_message(ADMIN, "!ban 9 3")

    assert messenger.texts_for(ADMIN) == ["Something went wrong, please try again later."]
    assert await store.profiles.get("9") is None


@pytest.mark.asyncio
async def test_contact_without_admins(messenger, strings, store):
    dispatcher = create_dispatcher(DispatchSettings(admin_ids=frozenset()), messenger, strings, store)

    await dispatcher.on_message(USER, "!contact anyone there")

    assert messenger.sent == [(USER, "No admins are configured to receive messages.")]
