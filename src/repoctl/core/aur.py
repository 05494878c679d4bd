"""AUR RPC client for looking up the latest published versions."""

import logging

import httpx

from repoctl.core.errors import RegistryError
from repoctl.models.state import Lookup

logger = logging.getLogger(__name__)


AUR_URL = "https://aur.archlinux.org"
RPC_PATH = "/rpc/v5/info"


class AURClient:
    """Client for the AUR RPC interface."""

    def __init__(
        self,
        base_url: str = AUR_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client = httpx.Client(
            base_url=base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.client.close()

    def close(self) -> None:
        self.client.close()

    def info(self, name: str, timeout: float | None = None) -> dict | None:
        """Get the AUR package record for name, or None if it is unknown."""
        kwargs = {"timeout": timeout} if timeout is not None else {}
        try:
            response = self.client.get(RPC_PATH, params={"arg[]": name}, **kwargs)
        except httpx.HTTPError as e:
            raise RegistryError(f"AUR request for {name} failed: {e}") from e

        if response.status_code == 429:
            raise RegistryError("AUR rate limit exceeded")
        if response.status_code != 200:
            raise RegistryError(f"AUR returned HTTP {response.status_code} for {name}")

        try:
            data = response.json()
        except ValueError:
            raise RegistryError(f"AUR returned invalid JSON for {name}")

        if data.get("type") == "error":
            raise RegistryError(f"AUR error: {data.get('error', 'unknown error')}")

        for result in data.get("results", []):
            if result.get("Name") == name:
                return result
        return None

    def latest_version(self, name: str, timeout: float | None = None) -> Lookup:
        """Look up the latest version of a package in the AUR."""
        try:
            result = self.info(name, timeout=timeout)
        except RegistryError as e:
            if isinstance(e.__cause__, httpx.TimeoutException):
                return Lookup.cancelled()
            logger.debug("lookup of %s failed: %s", name, e)
            return Lookup.failed(str(e))

        if result is None or not result.get("Version"):
            return Lookup.not_found()
        return Lookup.found(result["Version"])
