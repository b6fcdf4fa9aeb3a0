from __future__ import annotations

import logging

from voicecontrol.enforcement.models import Severity
from voicecontrol.services.notifier import CompositeNotifier, LogNotifier
from voicecontrol.testing.fakes import RecordingNotifier


class _Broken:
    def notify(self, message, severity):
        raise RuntimeError("boom")


def test_composite_isolates_failing_sink():
    first, last = RecordingNotifier(), RecordingNotifier()
    notifier = CompositeNotifier([first, _Broken(), last])

    notifier.notify("User server-muted", Severity.SUCCESS)

    assert first.messages == last.messages == [("User server-muted", Severity.SUCCESS)]


def test_log_notifier_uses_warning_for_failures(caplog):
    with caplog.at_level(logging.INFO, logger="voicecontrol.notifier"):
        LogNotifier().notify("Action failed (403)", Severity.FAILURE)
        LogNotifier().notify("User server-muted", Severity.SUCCESS)

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.WARNING, logging.INFO]
