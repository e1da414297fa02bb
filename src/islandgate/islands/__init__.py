"""Deferred islands: bootstrap hand-off, activation and bundle loading."""

from islandgate.islands.activator import ActivationState, DeferredIslandActivator
from islandgate.islands.bootstrap import (
    BootstrapContext,
    read_consent_bootstrap,
    render_consent_bootstrap,
    render_deferred_bootstrap,
)
from islandgate.islands.bundle import FunctionIsland, Island, IslandBundle
from islandgate.islands.loader import HttpBundleLoader
from islandgate.islands.reporting import ErrorReporter, LoggingErrorReporter

__all__ = [
    "ActivationState",
    "BootstrapContext",
    "DeferredIslandActivator",
    "ErrorReporter",
    "FunctionIsland",
    "HttpBundleLoader",
    "Island",
    "IslandBundle",
    "LoggingErrorReporter",
    "read_consent_bootstrap",
    "render_consent_bootstrap",
    "render_deferred_bootstrap",
]
