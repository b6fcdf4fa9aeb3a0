from __future__ import annotations

from dataclasses import dataclass

import pytest

from voicecontrol.enforcement.dispatcher import MutationDispatcher
from voicecontrol.enforcement.engine import EnforcementEngine
from voicecontrol.enforcement.registry import TargetRegistry
from voicecontrol.services.stats import EnforcementStats
from voicecontrol.testing.fakes import (
    FakeCredentialProvider,
    FakeDirectory,
    FakePermissionOracle,
    FakeTransport,
    RecordingNotifier,
)

BOT_ID = 1000
GUILD_ID = 500
VOICE_CHANNEL = 42
WATCHED = 7


@dataclass
class Harness:
    registry: TargetRegistry
    directory: FakeDirectory
    permissions: FakePermissionOracle
    credentials: FakeCredentialProvider
    transport: FakeTransport
    notifier: RecordingNotifier
    stats: EnforcementStats
    engine: EnforcementEngine


@pytest.fixture
def harness() -> Harness:
    registry = TargetRegistry()
    directory = FakeDirectory({VOICE_CHANNEL: GUILD_ID})
    permissions = FakePermissionOracle(allowed=True)
    credentials = FakeCredentialProvider()
    transport = FakeTransport()
    notifier = RecordingNotifier()
    stats = EnforcementStats()
    dispatcher = MutationDispatcher(
        credentials=credentials,
        transport=transport,
        notifier=notifier,
        stats=stats,
    )
    engine = EnforcementEngine(
        registry=registry,
        directory=directory,
        permissions=permissions,
        dispatcher=dispatcher,
        acting_identity=lambda: BOT_ID,
        stats=stats,
    )
    return Harness(registry, directory, permissions, credentials, transport, notifier, stats, engine)
