# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""OpenEd partner API client.

Async HTTP client for the OpenEd partner API: OAuth token acquisition,
resource search, and the standard group / grade group listings.

Tokens are opaque to this client. get_token() obtains one; every other
call just sends it as a bearer token.

Example:
    async with PartnerClient(settings.partner) as client:
        token = await client.get_token()
        results = await client.search_resources(
            {"descriptive": "counting", "grades_range": "K-1"}, token
        )
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from opened_catalog.core.config.settings import PartnerAPISettings
from opened_catalog.services.partner.exceptions import PartnerAPIError
from opened_catalog.services.partner.models import (
    GradeGroupList,
    ResourceList,
    StandardGroupList,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

TOKEN_PATH = "/1/oauth/get_token"
RESOURCES_PATH = "/1/resources.json"
STANDARD_GROUPS_PATH = "/1/standard_groups.json"
GRADE_GROUPS_PATH = "/1/grade_groups.json"


class PartnerClient:
    """Async client for the OpenEd partner API.

    Attributes:
        _settings: Partner API configuration.
        _client: HTTP client bound to the partner base URI.
    """

    def __init__(
        self,
        settings: PartnerAPISettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the partner client.

        Args:
            settings: Partner API configuration.
            transport: Optional httpx transport, used by tests.
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_uri,
            timeout=settings.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "PartnerClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_token(
        self,
        client_id: str | None = None,
        secret: str | None = None,
        username: str | None = None,
    ) -> str:
        """Obtain an access token.

        Missing credentials fall back to the configured ones.

        Returns:
            The access token.

        Raises:
            PartnerAPIError: If the request fails or no token is returned.
        """
        client_id = client_id or self._settings.client_id
        form = {
            "client_id": client_id,
            "secret": secret or self._settings.client_secret.get_secret_value(),
            "username": username or self._settings.username,
        }
        logger.info("Getting token for %s", client_id)

        data = await self._request("POST", TOKEN_PATH, data=form)
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise PartnerAPIError("No access token in response")
        return token

    async def search_resources(self, query_params: dict[str, str], token: str) -> ResourceList:
        """Search resources matching the given query parameters."""
        logger.debug("Searching resources with %s", query_params)
        data = await self._request("GET", RESOURCES_PATH, token=token, params=query_params)
        return self._parse(ResourceList, data)

    async def list_standard_groups(self, token: str) -> StandardGroupList:
        """List all standard groups."""
        data = await self._request("GET", STANDARD_GROUPS_PATH, token=token)
        return self._parse(StandardGroupList, data)

    async def list_grade_groups(self, standard_group_id: int, token: str) -> GradeGroupList:
        """List the grade groups of a standard group."""
        data = await self._request(
            "GET",
            GRADE_GROUPS_PATH,
            token=token,
            params={"standard_group": str(standard_group_id)},
        )
        return self._parse(GradeGroupList, data)

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        **kwargs: Any,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Partner API %s %s failed: %s", method, path, e.response.status_code)
            raise PartnerAPIError(
                f"{method} {path} failed",
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Partner API %s %s error: %s", method, path, e)
            raise PartnerAPIError(f"{method} {path} error: {e}") from e
        except ValueError as e:
            raise PartnerAPIError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise PartnerAPIError(f"Unexpected {model.__name__} payload: {e}") from e
