from __future__ import annotations

import logging
from typing import Optional

from ..services.stats import EnforcementStats
from .interfaces import CredentialProvider, MutationTransport, NotificationSink
from .models import ActionRequest, DispatchOutcome, OutcomeKind, Severity, TransportError

log = logging.getLogger("voicecontrol.dispatcher")


class MutationDispatcher:
    """Sends one member PATCH per action request and reports the result.

    Each request is attempted exactly once. Failures are reported to the
    notification sink and never raised to the caller.
    """

    def __init__(
        self,
        *,
        credentials: CredentialProvider,
        transport: MutationTransport,
        notifier: NotificationSink,
        stats: Optional[EnforcementStats] = None,
    ) -> None:
        self.credentials = credentials
        self.transport = transport
        self.notifier = notifier
        self.stats = stats or EnforcementStats()

    async def dispatch(self, request: ActionRequest) -> DispatchOutcome:
        token = self.credentials.current_token()
        if not token:
            outcome = DispatchOutcome(OutcomeKind.AUTH_UNAVAILABLE, request)
            self._report(outcome)
            return outcome

        try:
            status = await self.transport.patch_member(
                request.group_id,
                request.subject_id,
                request.mutation.body(),
                token=token,
            )
        except TransportError as e:
            outcome = DispatchOutcome(OutcomeKind.NETWORK_FAILURE, request, error=str(e))
            self._report(outcome)
            return outcome

        if 200 <= status < 300:
            outcome = DispatchOutcome(OutcomeKind.SUCCESS, request, status_code=status)
        else:
            outcome = DispatchOutcome(OutcomeKind.REJECTED, request, status_code=status)
        self._report(outcome)
        return outcome

    def _report(self, outcome: DispatchOutcome) -> None:
        self.stats.record_outcome(outcome.kind)
        req = outcome.request

        if outcome.kind is OutcomeKind.SUCCESS:
            log.info("%s ok guild=%s user=%s", req.mutation.value, req.group_id, req.subject_id)
            self.notifier.notify(req.mutation.success_message, Severity.SUCCESS)
            return

        if outcome.kind is OutcomeKind.AUTH_UNAVAILABLE:
            message = "Could not obtain an auth token"
        elif outcome.kind is OutcomeKind.REJECTED:
            message = f"Action failed ({outcome.status_code})"
        else:
            message = "A network error occurred"

        log.warning(
            "%s failed guild=%s user=%s kind=%s status=%s error=%s",
            req.mutation.value,
            req.group_id,
            req.subject_id,
            outcome.kind.value,
            outcome.status_code,
            outcome.error,
        )
        self.notifier.notify(message, Severity.FAILURE)
