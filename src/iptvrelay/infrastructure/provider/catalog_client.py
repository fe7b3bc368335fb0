"""Provider catalog client: async httpx calls to ``player_api.php``."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from iptvrelay.domain.exceptions import CatalogError
from iptvrelay.infrastructure.config.schema import CatalogConfig, ProviderConfig

log = structlog.get_logger(__name__)


class HttpxCatalogClient:
    """Async provider API client using httpx.

    Implements ``CatalogClientPort`` from domain.ports.catalog.  Payloads
    are returned as decoded JSON; reshaping happens in the use case.
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig,
        catalog: CatalogConfig,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._provider = provider
        self._http = http_client
        self._user_agent = catalog.user_agent
        self._timeout = httpx.Timeout(catalog.timeout_seconds)
        self._listing_timeout = httpx.Timeout(catalog.listing_timeout_seconds)

    @property
    def api_url(self) -> str:
        return f"{self._provider.base_url}/player_api.php"

    def _params(self, action: str, extra: dict[str, str] | None) -> dict[str, str]:
        """Build query params with credentials and action."""
        return {
            "username": self._provider.username,
            "password": self._provider.password,
            "action": action,
            **(extra or {}),
        }

    async def fetch(
        self,
        action: str,
        params: dict[str, str] | None = None,
        *,
        listing: bool = False,
    ) -> Any:
        """GET one provider action and return its JSON payload.

        Raises:
            CatalogError: network failure, non-2xx status or invalid JSON.
        """
        try:
            resp = await self._http.get(
                self.api_url,
                params=self._params(action, params),
                headers={"User-Agent": self._user_agent},
                timeout=self._listing_timeout if listing else self._timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning(
                "catalog_http_error",
                action=action,
                status=exc.response.status_code,
            )
            raise CatalogError() from exc
        except httpx.HTTPError as exc:
            log.warning("catalog_network_error", action=action, error=type(exc).__name__)
            raise CatalogError() from exc
        except ValueError as exc:
            log.warning("catalog_invalid_json", action=action)
            raise CatalogError() from exc
