"""HTTP client for the ClickDealer affiliate API."""

from types import TracebackType
from typing import Any

import httpx
import structlog

from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import Configuration

logger = structlog.get_logger()


class SyncError(Exception):
    """A fetch from the ClickDealer API failed."""

    @property
    def message(self) -> str:
        return str(self)


class NetworkFailure(SyncError):
    """The request never produced a response."""


class ApiStatusFailure(SyncError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int):
        super().__init__(f"API Error: {status_code}")
        self.status_code = status_code


class ParseFailure(SyncError):
    """The response body was not the JSON document we expect."""


class ClickDealerClient:
    """Async client for the conversions and clicks endpoints.

    Use as an async context manager so the underlying connection pool is
    closed after each sync cycle.
    """

    def __init__(
        self,
        config: Configuration,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Saved API configuration (endpoint and bearer key)
            timeout: Request timeout in seconds, defaults to CLICKDEALER_TIMEOUT
            transport: Optional transport override, used by tests
        """
        self.config = config
        self.logger = logger.bind(
            component="clickdealer_client",
            affiliate_id=config.affiliate_id,
            endpoint=config.api_endpoint,
        )
        self._http_client = httpx.AsyncClient(
            base_url=config.api_endpoint,
            headers={
                "Authorization": f"Bearer {config.api_key.get_secret_value()}",
                "Content-Type": "application/json",
            },
            timeout=timeout if timeout is not None else settings.CLICKDEALER_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "ClickDealerClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def fetch_conversions(self) -> list[dict[str, Any]]:
        """Fetch conversions (leads) for the configured affiliate."""
        return await self._get_collection("/conversions", "conversions")

    async def fetch_clicks(self) -> list[dict[str, Any]]:
        """Fetch raw click records for the configured affiliate."""
        return await self._get_collection("/clicks", "clicks")

    async def _get_collection(self, path: str, key: str) -> list[dict[str, Any]]:
        """GET ``path`` and return the list stored under ``key`` in the body.

        Raises:
            NetworkFailure: transport-level error or timeout
            ApiStatusFailure: non-2xx status
            ParseFailure: body is not a JSON object holding a list under ``key``
        """
        try:
            response = await self._http_client.get(path)
        except httpx.RequestError as e:
            self.logger.warning("clickdealer_request_error", path=path, error=str(e))
            raise NetworkFailure(f"Failed to connect to ClickDealer: {e}") from e

        if not response.is_success:
            self.logger.warning("clickdealer_api_error", path=path, status_code=response.status_code)
            raise ApiStatusFailure(response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            self.logger.warning("clickdealer_invalid_json", path=path)
            raise ParseFailure(f"Invalid JSON from ClickDealer {path}") from e

        if not isinstance(body, dict):
            raise ParseFailure(f"Unexpected response shape from ClickDealer {path}")

        records = body.get(key)
        if records is None:
            return []
        if not isinstance(records, list):
            raise ParseFailure(f"Expected a list under '{key}' from ClickDealer {path}")

        self.logger.debug("clickdealer_fetched", path=path, count=len(records))
        return records
