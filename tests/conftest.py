import os, sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Ensure required environment variables for keybot.config
os.environ.setdefault("DISCORD_API_TOKEN", "test-token")
os.environ.setdefault("ADMIN_IDS", "1")

from keybot.commands.types import DispatchSettings
from keybot.strings import Strings


class RecordingMessenger:
    """Messenger fake that keeps every outbound message."""

    def __init__(self):
        self.sent = []

    async def send(self, actor_id, text):
        self.sent.append((actor_id, text))

    def texts_for(self, actor_id):
        return [text for aid, text in self.sent if aid == actor_id]


class FakeProfiles:
    """In-memory stand-in for the profile store."""

    def __init__(self, banned=()):
        self.banned = set(banned)
        self.interactions = []

    async def get_or_create_profile(self, actor_id):
        return SimpleNamespace(actor_id=actor_id, banned=actor_id in self.banned)

    async def record_interaction(self, actor_id):
        self.interactions.append(actor_id)


ADMIN_ID = "1"
USER_ID = "2"


@pytest.fixture
def strings():
    return Strings.load()


@pytest.fixture
def settings():
    return DispatchSettings(delimiter="!", admin_ids=frozenset({ADMIN_ID}))


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def profiles():
    return FakeProfiles()


@pytest.fixture
def banned_profiles():
    return FakeProfiles(banned={USER_ID})
