"""Authenticated connection to an Azure DevOps organization.

A connection wraps one ``httpx.AsyncClient`` and is created fresh for every
tool call (see ``create_connection``). Handlers never share a connection, so
nothing here needs locking.
"""
import base64
import logging
from typing import Any, Optional

import httpx

from .clients import BuildApi, CoreApi, GitApi, WikiApi, WorkApi, WorkItemTrackingApi
from .config import AdoSettings, load_settings

logger = logging.getLogger("azdo-mcp.connection")


class AdoApiError(Exception):
    """Raised when Azure DevOps answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, url: str = ""):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"Azure DevOps API error ({status_code}): {message}")


class AdoConnection:
    """Authenticated handle to the Azure DevOps REST API.

    Usage::

        async with create_connection() as connection:
            wit = connection.get_wit_api()
            item = await wit.get_work_item(42)
    """

    def __init__(
        self,
        settings: AdoSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.org_url + "/",
            headers={
                "Authorization": self.auth_header,
                "Accept": "application/json",
            },
            timeout=settings.timeout,
            transport=transport,
        )

    @property
    def auth_header(self) -> str:
        token = base64.b64encode(f":{self.settings.pat.get_secret_value()}".encode()).decode()
        return f"Basic {token}"

    async def __aenter__(self) -> "AdoConnection":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        api_version: Optional[str] = None,
        content_type: str = "application/json",
    ) -> httpx.Response:
        """Issue a request and return the raw response without status checks."""
        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["api-version"] = api_version or self.settings.api_version

        headers = {}
        if json is not None:
            headers["Content-Type"] = content_type

        logger.debug(f"{method} {path} params={query}")
        return await self._client.request(
            method,
            path.lstrip("/"),
            params=query,
            json=json,
            headers=headers,
        )

    async def send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        api_version: Optional[str] = None,
        content_type: str = "application/json",
    ) -> Any:
        """Issue a request and return the decoded JSON body.

        Raises:
            AdoApiError: for any non-2xx response
        """
        response = await self.request(
            method, path, params=params, json=json,
            api_version=api_version, content_type=content_type,
        )

        if response.status_code >= 400:
            message = response.text
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
            raise AdoApiError(response.status_code, message[:500], str(response.request.url))

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    # Area clients
    def get_core_api(self) -> CoreApi:
        return CoreApi(self)

    def get_wit_api(self) -> WorkItemTrackingApi:
        return WorkItemTrackingApi(self)

    def get_git_api(self) -> GitApi:
        return GitApi(self)

    def get_build_api(self) -> BuildApi:
        return BuildApi(self)

    def get_wiki_api(self) -> WikiApi:
        return WikiApi(self)

    def get_work_api(self) -> WorkApi:
        return WorkApi(self)


def create_connection(
    settings: Optional[AdoSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AdoConnection:
    """Build a fresh connection for a single tool invocation."""
    return AdoConnection(settings or load_settings(), transport=transport)
