"""
Version information and update checks.

The latest release is looked up on PyPI and cached for a day. In offline
mode only the cache is consulted.
"""

from __future__ import annotations

import logging
import platform
import re
from dataclasses import asdict, dataclass

import httpx

from .._version import get_version
from .cache import DEFAULT_TTL
from .collaborators import CacheManager

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/projgen/json"
LATEST_VERSION_KEY = "version:latest"


@dataclass(frozen=True)
class VersionInfo:
    """Installed version and runtime environment."""

    version: str
    python_implementation: str
    python_version: str
    platform: str
    architecture: str

    @classmethod
    def current(cls) -> VersionInfo:
        return cls(
            version=get_version(),
            python_implementation=platform.python_implementation(),
            python_version=platform.python_version(),
            platform=f"{platform.system()} {platform.release()}",
            architecture=platform.machine(),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def parse_version(value: str) -> tuple[int, ...]:
    """
    Numeric release tuple for comparisons.

    Pre-release suffixes are ignored: "1.2.0rc1" -> (1, 2, 0).
    """
    parts = []
    for part in value.strip().lstrip("v").split("."):
        match = re.match(r"\d+", part)
        if not match:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def is_newer(candidate: str, current: str) -> bool:
    return parse_version(candidate) > parse_version(current)


class PyPIVersionManager:
    """Default VersionManager backed by the PyPI JSON API."""

    def __init__(
        self,
        cache: CacheManager,
        client: httpx.Client | None = None,
        url: str = PYPI_URL,
        timeout: float = 5.0,
    ):
        self.cache = cache
        self.client = client
        self.url = url
        self.timeout = timeout

    def current(self) -> VersionInfo:
        return VersionInfo.current()

    def _fetch(self) -> str | None:
        client = self.client or httpx.Client(timeout=self.timeout)
        try:
            response = client.get(self.url)
            response.raise_for_status()
            return response.json()["info"]["version"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.debug("Update check failed: %s", e)
            return None
        finally:
            if self.client is None:
                client.close()

    def latest_version(self) -> str | None:
        """
        Latest released version, or None if unknown.

        Served from the cache when fresh; in offline mode a stale cache
        entry is used and the network is never touched.
        """
        cached = self.cache.get(LATEST_VERSION_KEY)
        if cached is not None:
            return cached

        if self.cache.is_offline():
            logger.debug("Offline mode: skipping update check")
            return self.cache.get(LATEST_VERSION_KEY, allow_expired=True)

        latest = self._fetch()
        if latest is not None:
            self.cache.put(LATEST_VERSION_KEY, latest, ttl=DEFAULT_TTL)
        return latest

    def update_available(self) -> str | None:
        """Latest version if it is newer than the installed one."""
        latest = self.latest_version()
        if latest and is_newer(latest, get_version()):
            return latest
        return None
