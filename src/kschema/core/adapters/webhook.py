from __future__ import annotations

import logging

import requests

from kschema.core.errors import TargetLookupError

_DEFAULT_TIMEOUT_SECONDS = 30.0


class WebhookTargetProvider:
    """Adapter for the external target lookup service (HTTP GET returning a JSON list)."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        log: logging.Logger | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.log = log or logging.getLogger(__name__)

    def lookup(self, endpoint: str, cluster_name: str, label: str) -> list[str]:
        """Return the database names the service assigns to (cluster_name, label)."""
        params = {"cluster": cluster_name, "label": label}
        try:
            resp = self.session.get(endpoint, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise TargetLookupError(
                f"Target lookup at {endpoint} failed for {cluster_name}: {exc}"
            ) from exc
        except ValueError as exc:
            raise TargetLookupError(
                f"Target lookup at {endpoint} returned invalid JSON: {exc}"
            ) from exc

        if not isinstance(payload, list) or not all(isinstance(d, str) for d in payload):
            raise TargetLookupError(
                f"Target lookup at {endpoint} must return a JSON list of database names."
            )

        self.log.debug(
            "lookup %s (cluster=%s, label=%s) returned %d database(s)",
            endpoint,
            cluster_name,
            label,
            len(payload),
        )
        return list(payload)
