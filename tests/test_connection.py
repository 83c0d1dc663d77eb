"""Tests for the authenticated connection."""
import pytest

from azdo_mcp.connection import AdoApiError


class TestSend:

    @pytest.mark.asyncio
    async def test_error_message_taken_from_body(self, connection, ado):
        ado.add("GET", "/_apis/projects", {"message": "Access denied"}, status_code=401)

        with pytest.raises(AdoApiError) as exc_info:
            await connection.send("GET", "_apis/projects")

        error = exc_info.value
        assert error.status_code == 401
        assert str(error) == "Azure DevOps API error (401): Access denied"
        assert error.url.startswith("https://dev.azure.com/contoso/_apis/projects")

    @pytest.mark.asyncio
    async def test_error_without_json_body(self, connection, ado):
        ado.add("GET", "/_apis/projects", "Service Unavailable", status_code=503)

        with pytest.raises(AdoApiError, match=r"\(503\): Service Unavailable"):
            await connection.send("GET", "_apis/projects")

    @pytest.mark.asyncio
    async def test_empty_body_decodes_to_empty_dict(self, connection, ado):
        ado.add("DELETE", "/_apis/things/1", None, status_code=204)

        assert await connection.send("DELETE", "_apis/things/1") == {}

    @pytest.mark.asyncio
    async def test_none_params_dropped_and_api_version_override(self, connection, ado):
        ado.add("GET", "/_apis/projects", {"value": []})

        await connection.send("GET", "/_apis/projects", params={"$top": None, "stateFilter": "all"},
                              api_version="7.0")

        params = ado.requests[0].url.params
        assert "$top" not in params
        assert params["stateFilter"] == "all"
        assert params["api-version"] == "7.0"

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, connection):
        async with connection as conn:
            assert conn is connection
        assert connection._client.is_closed
