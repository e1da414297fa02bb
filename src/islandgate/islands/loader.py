"""HTTP loader for the deferred bundle."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from islandgate.config import CoordinatorConfig
from islandgate.exceptions import DeferredLoadError
from islandgate.islands.bootstrap import BootstrapContext
from islandgate.islands.bundle import IslandBundle

_logger = logging.getLogger(__name__)


class HttpBundleLoader:
    """Fetch the deferred script, then activate the bundle's islands.

    Instances are usable directly as the activator's ``on_ready`` callback.
    """

    def __init__(
        self,
        config: CoordinatorConfig,
        http_session: aiohttp.ClientSession,
        bundle: IslandBundle,
    ) -> None:
        self._config = config
        self._http = http_session
        self._bundle = bundle
        self.source: str | None = None

    async def fetch(self, script_path: str) -> str:
        url = self._config.url_for(script_path)
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(url) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise DeferredLoadError(
                        f"HTTP {resp.status} fetching {script_path}",
                        script_path=script_path,
                        status_code=resp.status,
                    )
        except DeferredLoadError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise DeferredLoadError(
                f"Fetching {script_path} failed: {exc}",
                script_path=script_path,
            ) from exc

        if not text.strip():
            raise DeferredLoadError(f"Empty deferred bundle at {script_path}", script_path=script_path)
        return text

    async def __call__(self, context: BootstrapContext) -> None:
        self.source = await self.fetch(context.script_path)
        self._bundle.activate(context)
