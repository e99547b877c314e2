from __future__ import annotations

from typing import Any, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from kschema.core.errors import RegistryError

API_VERSION = "2021-10"
_SCOPE = "https://eventhubs.azure.net/.default"
_RETRY_STATUS_CODES = (408, 429, 500, 502, 503, 504)
_DEFAULT_TIMEOUT_SECONDS = 30.0


class TokenCredential(Protocol):
    """Subset of the azure-core TokenCredential interface used for bearer auth."""

    def get_token(self, *scopes: str, **kwargs: Any) -> Any:
        """Return an object with a `.token` attribute."""
        ...


def _retrying_session(retries: int) -> requests.Session:
    """Return a session retrying idempotent requests on throttling and 5xx responses."""
    retry = Retry(
        total=retries,
        backoff_factor=0.8,
        status_forcelist=_RETRY_STATUS_CODES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    session = requests.Session()
    session.mount("https://", HTTPAdapter(max_retries=retry))
    return session


class SchemaRegistryClient:
    """Read-only client for an Event Hubs schema registry namespace."""

    def __init__(
        self,
        endpoint: str,
        *,
        credential: TokenCredential | None = None,
        session: requests.Session | None = None,
        retries: int = 3,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """
        Create a schema registry client.

        Args:
            endpoint: Fully qualified namespace, e.g. `myns.servicebus.windows.net`.
                      An `https://` prefix is accepted and stripped.
            credential: Optional credential used to obtain bearer tokens.
            session: HTTP session; a retrying session is created when omitted.
            retries: Retry budget for the default session.
            timeout: Per-request timeout in seconds.
        """
        self.endpoint = endpoint.removeprefix("https://").rstrip("/")
        self.credential = credential
        self.session = session or _retrying_session(retries)
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.credential is not None:
            try:
                token = self.credential.get_token(_SCOPE)
            except Exception as exc:  # noqa: BLE001
                raise RegistryError(
                    f"Could not obtain a token for {self.endpoint}: {exc}"
                ) from exc
            headers["Authorization"] = f"Bearer {token.token}"
        return headers

    def list_schema_groups(self) -> list[str]:
        """Return the names of every schema group the caller may access."""
        groups: list[str] = []
        url: str | None = f"https://{self.endpoint}/$schemaGroups"
        params: dict[str, str] | None = {"api-version": API_VERSION}

        while url:
            try:
                resp = self.session.get(
                    url, params=params, headers=self._headers(), timeout=self.timeout
                )
                if resp.status_code != 200:
                    raise RegistryError(
                        f"Listing schema groups on {self.endpoint} returned "
                        f"HTTP {resp.status_code}: {resp.text[:200]}"
                    )
                payload = resp.json()
            except requests.RequestException as exc:
                raise RegistryError(
                    f"Listing schema groups on {self.endpoint} failed: {exc}"
                ) from exc
            except ValueError as exc:
                raise RegistryError(
                    f"Schema registry {self.endpoint} returned invalid JSON: {exc}"
                ) from exc

            if not isinstance(payload, dict):
                raise RegistryError(
                    f"Schema registry {self.endpoint} returned an unexpected payload."
                )
            groups.extend(str(g) for g in payload.get("schemaGroups") or [])
            # nextLink already carries the query string
            url = payload.get("nextLink")
            if url and url.startswith("/"):
                url = f"https://{self.endpoint}{url}"
            params = None

        return groups
