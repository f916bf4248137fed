"""Base connector — shared behavior for the Chatwoot, Evolution and n8n connectors.

The ABC enforces the interface every connector implements, while providing
real behavior for cross-cutting concerns:

  - HTTP client lifecycle (lazy httpx.AsyncClient, explicit close)
  - Service credential resolution from the environment
  - Per-call auth headers: the caller's access token when one is passed
    directly, otherwise the worker-side service credential
  - Boundary validation: raw records that fail their Pydantic model are
    dropped and counted, never passed downstream
  - Consistent error handling: expected failures → result objects

Nothing here retries. Every call is a single attempt and the caller decides
whether to re-invoke after showing the failure.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, TypeVar

import httpx
from inbox_shared.access_models import ServiceCheckResult
from inbox_shared.models import ErrorKind
from inbox_shared.service_config import ServiceConfig
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseConnector(ABC):
    """Abstract base for all external service connectors."""

    def __init__(self, config: ServiceConfig) -> None:
        self.config = config
        self._client: httpx.AsyncClient | None = None
        self.request_count: int = 0

    @property
    def service_type(self) -> str:
        return self.config.service_type

    def _resolve_credential(self) -> str:
        """Read the service credential from the environment variable named in config."""
        env_var = self.config.auth_env_var
        if not env_var:
            raise ValueError(f"No auth_env_var configured for service '{self.config.service_id}'")
        value = os.environ.get(env_var, "")
        if not value:
            raise ValueError(f"Environment variable '{env_var}' is not set or empty")
        return value

    def _optional_credential(self) -> str:
        """The service credential if one is configured and set, else "".

        For services that work unauthenticated (the n8n webhooks).
        """
        if not self.config.auth_env_var:
            return ""
        return os.environ.get(self.config.auth_env_var, "")

    def _get_base_url(self) -> str:
        """Return the base URL, preferring config override over the default."""
        if self.config.base_url:
            return self.config.base_url
        return self._default_base_url()

    @abstractmethod
    def _default_base_url(self) -> str:
        """Default API base URL for this connector type."""

    @abstractmethod
    def _auth_headers(self, access_token: str) -> dict[str, str]:
        """Build per-call auth headers from the caller's token (or the service credential)."""

    @abstractmethod
    async def _check_connection(self, client: httpx.AsyncClient) -> ServiceCheckResult:
        """Verify connectivity — lightweight call to validate credentials."""

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Auth headers are not baked into the client: the operator token changes
        per call, so each request carries its own.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._get_base_url(),
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout_seconds,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        access_token: str = "",
        **kwargs: Any,
    ) -> httpx.Response:
        """Make one authenticated HTTP request and raise on non-2xx."""
        headers = {**self._auth_headers(access_token), **kwargs.pop("headers", {})}
        self.request_count += 1
        response = await client.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()
        return response

    def _validate_records(
        self,
        items: Iterable[Any],
        model: type[ModelT],
    ) -> tuple[list[ModelT], int]:
        """Validate raw elements against a payload model. Returns (valid, rejected_count)."""
        valid: list[ModelT] = []
        rejected = 0
        for index, item in enumerate(items):
            try:
                valid.append(model.model_validate(item))
            except ValidationError as e:
                rejected += 1
                logger.warning(
                    f"Rejected malformed {self.service_type} record at index {index}: "
                    f"{e.error_count()} validation error(s)"
                )
        return valid, rejected

    async def check_connection(self) -> ServiceCheckResult:
        """Verify connectivity and return service metadata."""
        try:
            client = await self._get_client()
            return await self._check_connection(client)
        except Exception as e:
            return ServiceCheckResult(
                success=False,
                message=f"Connection failed: {e}",
                error_kind=ErrorKind.SOURCE_UNAVAILABLE,
                service_id=self.config.service_id,
                service_type=self.config.service_type,
            )
