"""Signing key retrieval and caching for OpenID Connect providers.

Providers publish their token signing keys as a JWKS document whose URL is
advertised by the OpenID discovery document. Keys rotate, so they are
cached with a TTL and refetched early when a token names a key ID the
cache has never seen.
"""

import asyncio
import time
from typing import Any, Callable

import httpx
import logfire
from jwt import PyJWK, PyJWKSet
from jwt.exceptions import PyJWKSetError

from gatekeep.adapter.error import SigningKeyFetchError


class SigningKeySource:
    """Where a key cache gets its JWKS document from."""

    async def fetch(self) -> dict[str, Any]:
        """Fetch the current JWKS document.

        Raises:
            SigningKeyFetchError: If the document cannot be retrieved
        """
        raise NotImplementedError


class DiscoverySigningKeySource(SigningKeySource):
    """Fetches keys via the provider's OpenID discovery document."""

    def __init__(
        self,
        discovery_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize discovery key source.

        Args:
            discovery_url: URL of .well-known/openid-configuration
            timeout_seconds: Timeout applied to each HTTP request
            transport: httpx transport override (tests)
        """
        self.discovery_url = discovery_url
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def fetch(self) -> dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self.transport
        ) as client:
            try:
                response = await client.get(self.discovery_url)
                response.raise_for_status()
                discovery = response.json()
                if not isinstance(discovery, dict):
                    raise SigningKeyFetchError(
                        f"Discovery document at {self.discovery_url} is not an object"
                    )
                jwks_uri = discovery.get("jwks_uri")
                if not jwks_uri or not isinstance(jwks_uri, str):
                    raise SigningKeyFetchError(
                        f"Discovery document at {self.discovery_url} has no jwks_uri"
                    )

                response = await client.get(jwks_uri)
                response.raise_for_status()
                document = response.json()
            except httpx.HTTPError as e:
                raise SigningKeyFetchError(
                    f"Failed to fetch signing keys from {self.discovery_url}: {e}"
                ) from e
            except ValueError as e:
                # Body was not JSON
                raise SigningKeyFetchError(
                    f"Malformed discovery or JWKS response from {self.discovery_url}"
                ) from e

        if not isinstance(document, dict):
            raise SigningKeyFetchError("JWKS document is not a JSON object")
        return document


class StaticSigningKeySource(SigningKeySource):
    """Serves a fixed JWKS document (tests, air-gapped deployments)."""

    def __init__(self, jwks: dict[str, Any]) -> None:
        self.jwks = jwks

    async def fetch(self) -> dict[str, Any]:
        return self.jwks


class SigningKeyCache:
    """TTL cache of one provider's signing keys.

    A refresh builds the complete new key set before swapping it in, so a
    reader sees either the old set or the new one. Only one refresh runs at
    a time. If a refresh fails the previous keys stay in use.

    Refreshes forced by an unknown key ID are rate limited, so a stream of
    tokens with made-up key IDs cannot turn into a stream of fetches.
    """

    def __init__(
        self,
        source: SigningKeySource,
        ttl_seconds: float = 3600,
        min_refresh_interval_seconds: float = 60,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize signing key cache.

        Args:
            source: JWKS source
            ttl_seconds: Age after which the key set is refetched
            min_refresh_interval_seconds: Minimum gap between fetch attempts
                after the first one
            name: Provider name, for logs
            clock: Monotonic clock, replaceable in tests
        """
        self.source = source
        self.ttl_seconds = ttl_seconds
        self.min_refresh_interval_seconds = min_refresh_interval_seconds
        self.name = name
        self._clock = clock

        self._keys: dict[str, PyJWK] = {}
        self._fetched_at: float | None = None
        self._attempted_at: float | None = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def key_ids(self) -> list[str]:
        return list(self._keys)

    async def get_key(self, kid: str | None) -> PyJWK | None:
        """Return the signing key for a key ID.

        Args:
            kid: Key ID from the token header. Without one, the key is only
                returned when the set holds exactly one key.

        Returns:
            The key, or None if the provider does not publish it
        """
        if self._is_stale() and self._may_attempt():
            await self._refresh(self._generation, reason="ttl")

        key = self._lookup(kid)
        if key is None and kid and self._may_attempt():
            await self._refresh(self._generation, reason="unknown_kid")
            key = self._lookup(kid)
        return key

    async def refresh(self) -> None:
        """Refetch the key set now."""
        await self._refresh(self._generation, reason="manual")

    def _lookup(self, kid: str | None) -> PyJWK | None:
        keys = self._keys
        if kid:
            return keys.get(kid)
        if len(keys) == 1:
            return next(iter(keys.values()))
        return None

    def _is_stale(self) -> bool:
        if self._fetched_at is None:
            return True
        return self._clock() - self._fetched_at >= self.ttl_seconds

    def _may_attempt(self) -> bool:
        if self._attempted_at is None:
            return True
        return self._clock() - self._attempted_at >= self.min_refresh_interval_seconds

    async def _refresh(self, observed_generation: int, reason: str) -> None:
        async with self._lock:
            if self._generation != observed_generation:
                # Another caller refreshed while we waited
                return

            self._attempted_at = self._clock()
            self._generation += 1
            with logfire.span("signing_key_cache.refresh", provider=self.name, reason=reason):
                try:
                    document = await self.source.fetch()
                    key_set = PyJWKSet.from_dict(document)
                except (
                    SigningKeyFetchError,
                    PyJWKSetError,
                    TypeError,
                    AttributeError,
                ) as e:
                    # Unreachable endpoint or a key set that does not parse
                    logfire.warn(
                        "Signing key refresh failed, keeping previous keys",
                        provider=self.name,
                        error=str(e),
                        cached_keys=len(self._keys),
                    )
                    return

                keys: dict[str, PyJWK] = {}
                for key in key_set.keys:
                    keys[key.key_id or ""] = key

                self._keys = keys
                self._fetched_at = self._attempted_at
                logfire.info(
                    "Signing keys refreshed", provider=self.name, key_count=len(keys)
                )
