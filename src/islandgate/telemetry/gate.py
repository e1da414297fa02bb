"""Consent-checked, exactly-once telemetry dispatch.

Every telemetry-producing observer goes through :meth:`DispatchGate.try_dispatch`.
The order of checks matters:

1. A latched guard means the occurrence was already attempted; skip.
2. Without analytics consent, skip *without* latching, so the same
   occurrence may still fire after a later grant.
3. Otherwise latch first, then hand off to the transport. Latching before
   the hand-off makes a re-entrant call on the same guard (for example a
   transport callback that dispatches again) see the latch and skip.

A transport failure leaves the guard latched: the event counts as attempted.
"""

from __future__ import annotations

import logging

from islandgate._redact import redact_for_log
from islandgate.consent.state import ConsentSnapshot, analytics_allowed
from islandgate.exceptions import TelemetryTransportError
from islandgate.telemetry.debug import DebugLog, DebugRecord
from islandgate.telemetry.events import TelemetryEvent
from islandgate.telemetry.guard import FireGuard
from islandgate.telemetry.outcome import DispatchOutcome, SkipReason
from islandgate.telemetry.transport import TelemetryTransport

_logger = logging.getLogger(__name__)


class DispatchGate:
    def __init__(self, transport: TelemetryTransport, *, debug_log: DebugLog | None = None) -> None:
        self._transport = transport
        self._debug_log = debug_log

    def try_dispatch(
        self,
        event: TelemetryEvent,
        guard: FireGuard,
        consent: ConsentSnapshot | None,
    ) -> DispatchOutcome:
        """Dispatch *event* at most once for *guard*, only with analytics consent.

        Raises
        ------
        TelemetryTransportError
            The transport failed to accept the event. The guard stays latched.
        """
        if guard.latched:
            return DispatchOutcome.skipped(SkipReason.ALREADY_FIRED)

        allowed = analytics_allowed(consent)
        payload = event.transport_payload()
        if self._debug_log is not None:
            self._debug_log.push(DebugRecord(name=event.name.value, payload=payload, consented=allowed))

        if not allowed:
            _logger.debug("Telemetry %s skipped: no analytics consent", event.name)
            return DispatchOutcome.skipped(SkipReason.CONSENT_DENIED)

        if not guard.latch():
            return DispatchOutcome.skipped(SkipReason.ALREADY_FIRED)

        _logger.debug("Dispatching telemetry %s payload=%s", event.name, redact_for_log(payload))
        try:
            self._transport.send(event.name.value, payload)
        except TelemetryTransportError:
            raise
        except Exception as exc:
            raise TelemetryTransportError(
                f"Transport failed for {event.name}: {exc}",
                event_name=event.name.value,
            ) from exc
        return DispatchOutcome.dispatched()
