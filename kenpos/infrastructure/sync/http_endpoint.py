"""
HTTP endpoint for offline sale sync.

Pushes queued sales to a remote back office with retries and a circuit
breaker. Every failure degrades to ``False`` so the sale stays queued.
"""

from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kenpos.config import get_logger, get_settings
from kenpos.config.settings import SyncSettings
from kenpos.core.entities.sale import Sale
from kenpos.core.exceptions import SyncError, SyncUnavailableError
from kenpos.core.interfaces.sync import IRemoteSyncEndpoint
from kenpos.infrastructure.sync.resilience import CircuitBreakerState

logger = get_logger(__name__)

# Remote already holds the sale
_ALREADY_SYNCED = 409


class HttpSyncEndpoint(IRemoteSyncEndpoint):
    """POSTs sales as JSON to ``{endpoint_url}/sales``."""

    def __init__(
        self,
        settings: SyncSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings().sync
        if not self.settings.endpoint_url:
            raise SyncUnavailableError("unset", "SYNC_ENDPOINT_URL is not configured")

        self.base_url = self.settings.endpoint_url.rstrip("/")
        self.circuit_breaker = CircuitBreakerState(
            name=self.base_url,
            failure_threshold=self.settings.failure_threshold,
            cooldown_seconds=self.settings.cooldown_seconds,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.settings.api_key:
                headers["Authorization"] = f"Bearer {self.settings.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.settings.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator with current settings."""
        delay = self.settings.retry_delay
        return retry(
            stop=stop_after_attempt(max(self.settings.max_retries, 1)),
            wait=wait_exponential(
                multiplier=delay,
                min=delay,
                max=delay * (self.settings.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "sync_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _post_sale(self, payload: dict) -> httpx.Response:
        return await self._get_client().post("/sales", json=payload)

    async def push_sale(self, sale: Sale) -> bool:
        """Send one sale. Returns False on any failure."""
        try:
            self.circuit_breaker.check()
            response = await self._get_retry_decorator()(self._post_sale)(
                sale.model_dump(mode="json")
            )
        except httpx.HTTPError as e:
            self.circuit_breaker.record_failure()
            logger.warning("sync_push_failed", sale_id=sale.id, error=str(e))
            return False
        except SyncError as e:
            logger.warning("sync_push_skipped", sale_id=sale.id, reason=e.code)
            return False

        if response.is_success or response.status_code == _ALREADY_SYNCED:
            self.circuit_breaker.record_success()
            logger.info("sync_push_accepted", sale_id=sale.id, status=response.status_code)
            return True

        if response.status_code >= 500:
            self.circuit_breaker.record_failure()
        logger.warning(
            "sync_push_rejected",
            sale_id=sale.id,
            status=response.status_code,
            body=response.text[:200],
        )
        return False

    async def health_check(self) -> bool:
        try:
            response = await self._get_client().get("/health")
        except httpx.HTTPError as e:
            logger.warning("sync_health_check_failed", error=str(e))
            return False
        return response.status_code == 200

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class NullSyncEndpoint(IRemoteSyncEndpoint):
    """Accepts every sale; used when no remote is configured."""

    async def push_sale(self, sale: Sale) -> bool:
        logger.debug("sync_push_local_only", sale_id=sale.id)
        return True

    async def health_check(self) -> bool:
        return True
