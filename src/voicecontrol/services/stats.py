from __future__ import annotations

import time
from dataclasses import dataclass, field

from ..enforcement.models import OutcomeKind


@dataclass
class EnforcementStats:
    started_at: float = field(default_factory=time.time)
    events_seen: int = 0
    skipped_unresolved: int = 0
    skipped_denied: int = 0
    requests_dispatched: int = 0
    succeeded: int = 0
    rejected: int = 0
    auth_unavailable: int = 0
    network_failures: int = 0

    def record_outcome(self, kind: OutcomeKind) -> None:
        if kind is OutcomeKind.SUCCESS:
            self.succeeded += 1
        elif kind is OutcomeKind.REJECTED:
            self.rejected += 1
        elif kind is OutcomeKind.AUTH_UNAVAILABLE:
            self.auth_unavailable += 1
        else:
            self.network_failures += 1

    def uptime_seconds(self) -> int:
        return int(time.time() - self.started_at)
