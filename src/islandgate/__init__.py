"""islandgate - consent-gated telemetry and deferred island activation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("islandgate")
except PackageNotFoundError:
    __version__ = "0+local"
from islandgate.attributes.locale import ResolvedLocale, TextDirection, resolve_locale
from islandgate.attributes.scroll import ScrollState, ScrollStateObserver
from islandgate.attributes.sync import DocumentAttributeSynchronizer
from islandgate.attributes.theme import ContrastMode, DisplayPreferences, MotionPreference, Theme
from islandgate.config import CoordinatorConfig
from islandgate.consent import ConsentSnapshot, ConsentSource, ConsentState
from islandgate.exceptions import (
    AttributeOwnershipError,
    ConfigError,
    DeferredLoadError,
    IslandGateError,
    TelemetryTransportError,
)
from islandgate.host.document import Document, Element
from islandgate.host.signals import EventSource, MediaQuery, OneShotSignal, Subscription
from islandgate.host.window import Window
from islandgate.islands import (
    ActivationState,
    BootstrapContext,
    DeferredIslandActivator,
    FunctionIsland,
    HttpBundleLoader,
    IslandBundle,
    render_deferred_bootstrap,
)
from islandgate.shell import PageShell
from islandgate.telemetry import (
    BeaconTransport,
    DispatchGate,
    DispatchOutcome,
    EventName,
    FireGuard,
    NoOpTransport,
    SkipReason,
    TelemetryEvent,
    TelemetryLayer,
)

__all__ = [
    "__version__",
    "ActivationState",
    "AttributeOwnershipError",
    "BeaconTransport",
    "BootstrapContext",
    "ConfigError",
    "ConsentSnapshot",
    "ConsentSource",
    "ConsentState",
    "ContrastMode",
    "CoordinatorConfig",
    "DeferredIslandActivator",
    "DeferredLoadError",
    "DispatchGate",
    "DispatchOutcome",
    "DisplayPreferences",
    "Document",
    "DocumentAttributeSynchronizer",
    "Element",
    "EventName",
    "EventSource",
    "FireGuard",
    "FunctionIsland",
    "HttpBundleLoader",
    "IslandBundle",
    "IslandGateError",
    "MediaQuery",
    "MotionPreference",
    "NoOpTransport",
    "OneShotSignal",
    "PageShell",
    "ResolvedLocale",
    "ScrollState",
    "ScrollStateObserver",
    "SkipReason",
    "Subscription",
    "TelemetryEvent",
    "TelemetryLayer",
    "TelemetryTransportError",
    "TextDirection",
    "Theme",
    "Window",
    "render_deferred_bootstrap",
    "resolve_locale",
]
