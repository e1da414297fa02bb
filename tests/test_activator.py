from __future__ import annotations

import asyncio

import pytest

from islandgate.consent.state import ConsentSnapshot
from islandgate.exceptions import DeferredLoadError, IslandGateError
from islandgate.host.signals import OneShotSignal
from islandgate.islands.activator import ActivationState, DeferredIslandActivator
from islandgate.islands.bootstrap import BootstrapContext


class _Reporter:
    def __init__(self) -> None:
        self.errors: list[Exception] = []

    def report(self, error: Exception) -> None:
        self.errors.append(error)


def test_activation_waits_for_interactive_signal() -> None:
    signal = OneShotSignal()
    contexts: list[BootstrapContext] = []
    activator = DeferredIslandActivator(signal, locale="he")

    activator.schedule(contexts.append, ConsentSnapshot.granted())
    assert contexts == []
    assert activator.state == ActivationState.SCHEDULED

    signal.fire()

    assert activator.state == ActivationState.ACTIVE
    assert contexts == [BootstrapContext(initial_analytics_consent=True, script_path="/deferred/islands.js", locale="he")]


def test_repeated_signal_activates_once() -> None:
    signal = OneShotSignal()
    calls = []
    activator = DeferredIslandActivator(signal)
    activator.schedule(calls.append, None)

    signal.fire()
    signal.fire()
    signal.fire()

    assert len(calls) == 1


@pytest.mark.parametrize(
    ("consent", "expected"),
    [
        (None, False),
        (ConsentSnapshot(), False),
        (ConsentSnapshot.denied(), False),
        (ConsentSnapshot.granted(), True),
    ],
)
def test_initial_analytics_consent_derived_from_snapshot(consent: ConsentSnapshot | None, expected: bool) -> None:
    signal = OneShotSignal()
    activator = DeferredIslandActivator(signal)
    activator.schedule(lambda _ctx: None, consent)

    assert activator.context is not None
    assert activator.context.initial_analytics_consent is expected


def test_schedule_twice_is_rejected() -> None:
    activator = DeferredIslandActivator(OneShotSignal())
    activator.schedule(lambda _ctx: None, None)

    with pytest.raises(IslandGateError):
        activator.schedule(lambda _ctx: None, None)


def test_signal_already_fired_activates_on_schedule() -> None:
    signal = OneShotSignal()
    signal.fire()
    calls = []
    activator = DeferredIslandActivator(signal)

    activator.schedule(calls.append, None)
    signal.fire()

    assert len(calls) == 1
    assert activator.state == ActivationState.ACTIVE


def test_sync_failure_is_reported_not_raised() -> None:
    signal = OneShotSignal()
    reporter = _Reporter()
    activator = DeferredIslandActivator(signal, error_reporter=reporter)

    def _boom(_ctx: BootstrapContext) -> None:
        raise RuntimeError("script error")

    activator.schedule(_boom, None)
    signal.fire()
    signal.fire()

    assert activator.state == ActivationState.FAILED
    assert len(reporter.errors) == 1
    assert isinstance(reporter.errors[0], DeferredLoadError)
    assert isinstance(reporter.errors[0].__cause__, RuntimeError)


def test_failing_reporter_does_not_escape() -> None:
    class _BrokenReporter:
        def report(self, error: Exception) -> None:
            raise RuntimeError("observability down")

    signal = OneShotSignal()
    activator = DeferredIslandActivator(signal, error_reporter=_BrokenReporter())
    activator.schedule(lambda _ctx: 1 / 0, None)

    signal.fire()

    assert activator.state == ActivationState.FAILED


def test_cancel_before_signal_prevents_activation() -> None:
    signal = OneShotSignal()
    calls = []
    activator = DeferredIslandActivator(signal)
    activator.schedule(calls.append, None)

    activator.cancel()
    signal.fire()

    assert calls == []
    assert activator.state == ActivationState.CANCELLED


@pytest.mark.asyncio
async def test_async_bootstrap_success() -> None:
    signal = OneShotSignal()
    seen: list[bool] = []
    activator = DeferredIslandActivator(signal)

    async def _load(ctx: BootstrapContext) -> None:
        await asyncio.sleep(0)
        seen.append(ctx.initial_analytics_consent)

    activator.schedule(_load, ConsentSnapshot.denied())
    signal.fire()
    assert activator.state == ActivationState.ACTIVATING

    state = await activator.wait()

    assert state == ActivationState.ACTIVE
    assert seen == [False]


@pytest.mark.asyncio
async def test_async_bootstrap_failure_is_reported() -> None:
    signal = OneShotSignal()
    reporter = _Reporter()
    activator = DeferredIslandActivator(signal, error_reporter=reporter)

    async def _load(_ctx: BootstrapContext) -> None:
        raise DeferredLoadError("HTTP 503 fetching /deferred/islands.js", status_code=503)

    activator.schedule(_load, None)
    signal.fire()
    state = await activator.wait()

    assert state == ActivationState.FAILED
    assert reporter.errors == [activator.error]
    assert activator.error is not None and activator.error.status_code == 503


@pytest.mark.asyncio
async def test_cancel_during_async_bootstrap() -> None:
    signal = OneShotSignal()
    reporter = _Reporter()
    started = asyncio.Event()
    activator = DeferredIslandActivator(signal, error_reporter=reporter)

    async def _load(_ctx: BootstrapContext) -> None:
        started.set()
        await asyncio.sleep(10)

    activator.schedule(_load, None)
    signal.fire()
    await started.wait()
    activator.cancel()
    await asyncio.sleep(0)

    assert activator.state == ActivationState.CANCELLED
    assert reporter.errors == []
