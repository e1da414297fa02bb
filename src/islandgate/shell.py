"""Page shell: one page instance's coordinator.

Mount order is fixed:

1. render the critical shell (``main`` landmark and page heading);
2. reconcile document attributes, before anything deferred can read them;
3. start the scroll observer;
4. schedule deferred activation with the current consent snapshot.

Unmounting tears all of it down, whichever step was reached.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from islandgate._constants import MAIN_CONTENT_ID
from islandgate.attributes.locale import ResolvedLocale, resolve_locale
from islandgate.attributes.scroll import ScrollStateObserver
from islandgate.attributes.sync import DocumentAttributeSynchronizer
from islandgate.attributes.theme import DisplayPreferences
from islandgate.config import CoordinatorConfig
from islandgate.consent.source import ConsentSource
from islandgate.host.document import Element
from islandgate.host.idle import IdleScheduler
from islandgate.host.signals import Subscription
from islandgate.host.window import Window
from islandgate.islands.activator import DeferredIslandActivator, ReadyCallback
from islandgate.islands.bundle import IslandBundle
from islandgate.islands.loader import HttpBundleLoader
from islandgate.islands.reporting import ErrorReporter
from islandgate.telemetry.debug import DebugLog
from islandgate.telemetry.gate import DispatchGate
from islandgate.telemetry.layer import TelemetryLayer
from islandgate.telemetry.transport import BeaconTransport, NoOpTransport, TelemetryTransport

_logger = logging.getLogger(__name__)


class PageShell:
    """Coordinator for a single page instance.

    Parameters
    ----------
    window : Window
        Host of this page instance.
    pathname : str
        Route path being rendered; its first segment selects the locale.
    heading : str
        Text of the page heading rendered in the critical shell.
    config : CoordinatorConfig or None
        Coordinator settings.
    consent : ConsentSource or None
        Consent decision source; an undecided source when omitted.
    preferences : DisplayPreferences or None
        Stored display preferences.
    transport : TelemetryTransport or None
        Destination of dispatched telemetry. When omitted, a beacon transport
        posting to ``config.telemetry_endpoint`` over ``http_session``, or a
        no-op transport if either is missing.
    bundle : IslandBundle or None
        Deferred islands besides telemetry.
    on_ready : callable or None
        Deferred bootstrap. Defaults to an
        :class:`~islandgate.islands.loader.HttpBundleLoader` over
        ``http_session``, or to activating ``bundle`` directly without one.
    error_reporter : ErrorReporter or None
        Error-observability collaborator for deferred failures.
    http_session : aiohttp.ClientSession or None
        Session used for the default beacon transport and bundle loader.
        The caller owns it.
    """

    def __init__(
        self,
        window: Window,
        pathname: str,
        *,
        heading: str = "",
        config: CoordinatorConfig | None = None,
        consent: ConsentSource | None = None,
        preferences: DisplayPreferences | None = None,
        transport: TelemetryTransport | None = None,
        bundle: IslandBundle | None = None,
        on_ready: ReadyCallback | None = None,
        error_reporter: ErrorReporter | None = None,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or CoordinatorConfig()
        self.window = window
        self.consent = consent or ConsentSource()
        self.locale: ResolvedLocale = resolve_locale(pathname, default=self._config.default_locale)
        self._heading = heading
        self.debug_log = DebugLog(self._config.debug_buffer_max)
        self._owns_transport = transport is None
        self.transport: TelemetryTransport = transport or self._default_transport(http_session)
        self.gate = DispatchGate(self.transport, debug_log=self.debug_log)
        self.telemetry = TelemetryLayer(self.gate, self.consent, self.locale.locale, pathname=pathname)
        self.bundle = bundle or IslandBundle(consent=self.consent, error_reporter=error_reporter)
        if self._config.telemetry_enabled:
            self.bundle.register(self.telemetry)
        if on_ready is None:
            if http_session is not None:
                on_ready = HttpBundleLoader(self._config, http_session, self.bundle)
            else:
                on_ready = self.bundle.activate
        self._on_ready: ReadyCallback = on_ready
        self.synchronizer = DocumentAttributeSynchronizer(window, self.locale, preferences)
        self.scroll = ScrollStateObserver(window, threshold=self._config.scroll_threshold)
        self.activator = DeferredIslandActivator(
            window.interactive,
            script_path=self._config.deferred_script_path,
            locale=self.locale.locale,
            error_reporter=error_reporter,
        )
        self._idle: Subscription | None = None
        self._mounted = False

    def _default_transport(self, http_session: aiohttp.ClientSession | None) -> TelemetryTransport:
        endpoint = self._config.telemetry_endpoint
        if endpoint is None or http_session is None:
            return NoOpTransport()
        return BeaconTransport(endpoint, http_session)

    @property
    def mounted(self) -> bool:
        return self._mounted

    def render_critical_shell(self) -> None:
        document = self.window.document
        if document.get_element_by_id(MAIN_CONTENT_ID) is not None:
            return
        document.append(Element(tag="main", id=MAIN_CONTENT_ID, attrs={"tabindex": "-1"}))
        document.append(Element(tag="h1", text=self._heading))

    def mount(self, *, idle: bool = False) -> None:
        """Mount the page; ``idle=True`` fires the interactive signal from the running loop."""
        if self._mounted:
            return
        self._mounted = True
        try:
            self.render_critical_shell()
            self.synchronizer.reconcile()
            self.scroll.start()
            self.activator.schedule(self._on_ready, self.consent.current)
            if idle:
                self._idle = IdleScheduler(
                    self.window.interactive,
                    loop=asyncio.get_running_loop(),
                    timeout_ms=self._config.idle_timeout_ms,
                ).start()
        except Exception:
            self.unmount()
            raise
        _logger.debug("Page mounted locale=%s", self.locale.locale)

    def unmount(self) -> None:
        idle, self._idle = self._idle, None
        if idle is not None:
            idle.cancel()
        self.scroll.stop()
        self.activator.cancel()
        self.bundle.close()
        self.telemetry.close()
        self._mounted = False

    async def aclose(self) -> None:
        """Unmount and flush a beacon transport the shell created."""
        self.unmount()
        if self._owns_transport and isinstance(self.transport, BeaconTransport):
            await self.transport.aclose()

    def navigate(self, pathname: str) -> None:
        """Client-side route change within this page instance's locale."""
        self.telemetry.navigate(pathname)

    def __enter__(self) -> PageShell:
        self.mount()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.unmount()
