"""Region code resolution used to pick a package mirror."""

from __future__ import annotations

import json
import time
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import requests

from preflight.constants import (
    GEO_HEADERS,
    GEO_PROVIDERS,
    GEO_TIMEOUT,
    TIMEZONE_COUNTRIES,
    UNKNOWN_COUNTRY,
)
from preflight.exceptions import LookupFailure
from preflight.utils import log


def valid_country(value: Any) -> bool:
    """Two ASCII letters, excluding the ``XX`` placeholder."""
    if not isinstance(value, str) or len(value) != 2:
        return False
    if not (value.isascii() and value.isalpha()):
        return False
    return value.upper() != UNKNOWN_COUNTRY


def country_from_timezone(timezone: Optional[str]) -> Optional[str]:
    if not timezone:
        return None
    return TIMEZONE_COUNTRIES.get(timezone.strip().lower())


class GeoProvider:
    """One geolocation endpoint and the JSON path holding the country code."""

    def __init__(self, url: str, path: Sequence[str], timeout: float = GEO_TIMEOUT) -> None:
        self.url = url
        self.path = tuple(path)
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"GeoProvider({self.url!r}, {'.'.join(self.path)!r})"

    def extract(self, payload: Any) -> Any:
        node = payload
        for key in self.path:
            if not isinstance(node, dict) or key not in node:
                raise LookupFailure(f"{self.url}: no '{'.'.join(self.path)}' in response")
            node = node[key]
        return node

    def _fetch(self, session: requests.Session) -> bytes:
        """Read the response body, giving up once ``timeout`` seconds have passed in total."""
        deadline = time.monotonic() + self.timeout
        body = bytearray()
        with session.get(self.url, headers=GEO_HEADERS, timeout=self.timeout, stream=True) as resp:
            resp.raise_for_status()
            for chunk in resp.iter_content(chunk_size=1024):
                body.extend(chunk)
                if time.monotonic() > deadline:
                    raise LookupFailure(f"{self.url}: no complete response within {self.timeout}s")
        return bytes(body)

    def query(self, session: requests.Session) -> str:
        """Return the upper-cased country code or raise LookupFailure."""
        try:
            payload = json.loads(self._fetch(session))
        except requests.RequestException as exc:
            raise LookupFailure(f"{self.url}: {exc.__class__.__name__}: {exc}") from exc
        except ValueError as exc:
            raise LookupFailure(f"{self.url}: response is not JSON") from exc
        value = self.extract(payload)
        if not valid_country(value):
            raise LookupFailure(f"{self.url}: unusable country value {value!r}")
        return value.upper()


def default_providers() -> List[GeoProvider]:
    return [GeoProvider(url, path) for url, path in GEO_PROVIDERS]


class CountryResolver:
    """Resolve the host's region code once and cache it for the process lifetime."""

    def __init__(
        self,
        timezone: Optional[str] = None,
        preset: Optional[str] = None,
        providers: Optional[Iterable[GeoProvider]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timezone = timezone
        self.providers = list(providers) if providers is not None else default_providers()
        self._session = session
        self._code: Optional[str] = None
        self.attempted = False
        preset = (preset or "").strip()
        if preset and valid_country(preset):
            self._code = preset.upper()
            self.attempted = True
        elif preset:
            log("WARN", f"Ignoring invalid COUNTRY '{preset}'; expected a two-letter country code")

    @property
    def code(self) -> Optional[str]:
        """Cached code without triggering resolution."""
        return self._code

    def resolve(self) -> Optional[str]:
        if self.attempted:
            return self._code
        self.attempted = True

        code = country_from_timezone(self.timezone)
        if code:
            log("DEBUG", f"Country {code} derived from timezone {self.timezone}")
            self._code = code
            return code

        code, source = self._query_providers()
        if code:
            log("DEBUG", f"Country {code} reported by {source}")
            self._code = code
        else:
            log("DEBUG", "Country could not be determined; using default mirrors")
        return self._code

    def _query_providers(self) -> Tuple[Optional[str], Optional[str]]:
        session = self._session or requests.Session()
        try:
            for provider in self.providers:
                try:
                    return provider.query(session), provider.url
                except LookupFailure as exc:
                    log("DEBUG", f"Geolocation lookup failed: {exc}")
        finally:
            if self._session is None:
                session.close()
        return None, None
