"""Tests for the Google Sheets adapter and its factory."""

import httpx
import pytest

from tuition_lookup.adapters.sheets.factory import create_grid_source
from tuition_lookup.adapters.sheets.google_sheets import GoogleSheetsClient
from tuition_lookup.core.config import SheetsSettings
from tuition_lookup.core.errors import MisconfiguredError, UpstreamUnavailableError


def _client(handler) -> GoogleSheetsClient:
    return GoogleSheetsClient(
        api_key="secret-key",
        sheet_id="sheet-123",
        sheet_name="Học phí T9",
        base_url="https://sheets.test/v4",
        transport=httpx.MockTransport(handler),
    )


class TestFetchGrid:
    @pytest.mark.asyncio
    async def test_builds_values_url_with_encoded_tab_and_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"values": [["ID"], ["1"]]})

        await _client(handler).fetch_grid()

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v4/spreadsheets/sheet-123/values/Học phí T9"
        assert b"/values/H%E1%BB%8Dc%20ph%C3%AD%20T9" in request.url.raw_path
        assert request.url.params["key"] == "secret-key"

    @pytest.mark.asyncio
    async def test_returns_values_as_strings(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"range": "A1:C3", "values": [["ID", "Họ tên"], [1, "An", None]]},
            )

        grid = await _client(handler).fetch_grid()

        assert grid == [["ID", "Họ tên"], ["1", "An", ""]]

    @pytest.mark.asyncio
    async def test_missing_values_means_empty_grid(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"range": "A1:Z1000"})

        assert await _client(handler).fetch_grid() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 403, 404, 500, 503])
    async def test_non_2xx_raises_upstream_error(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"error": {"message": "API key not valid"}})

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).fetch_grid()

        assert exc_info.value.details["upstream_status"] == status
        assert "API key" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).fetch_grid()

        assert exc_info.value.details["reason"] == "transport_error"

    @pytest.mark.asyncio
    async def test_timeout_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).fetch_grid()

        assert exc_info.value.details["reason"] == "timeout"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(UpstreamUnavailableError):
            await _client(handler).fetch_grid()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("values", [5, "A1", {"0": ["ID"]}])
    async def test_non_list_values_raise_upstream_error(self, values) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"range": "A1:Z1000", "values": values})

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).fetch_grid()

        assert exc_info.value.details["reason"] == "unexpected_payload"

    @pytest.mark.asyncio
    async def test_non_object_payload_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[["ID"], ["1"]])

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).fetch_grid()

        assert exc_info.value.details["reason"] == "unexpected_payload"


def test_cache_key_depends_on_sheet_and_tab() -> None:
    a = GoogleSheetsClient(api_key="k1", sheet_id="s", sheet_name="A")
    b = GoogleSheetsClient(api_key="k2", sheet_id="s", sheet_name="A")
    c = GoogleSheetsClient(api_key="k1", sheet_id="s", sheet_name="B")

    assert a.cache_key == b.cache_key
    assert a.cache_key != c.cache_key
    assert "k1" not in a.cache_key


class TestFactory:
    def test_builds_client_from_settings(self) -> None:
        cfg = SheetsSettings.model_construct(
            api_key="k", sheet_id="s", sheet_name="Tab", timeout_seconds=3.0
        )

        source = create_grid_source(cfg)

        assert isinstance(source, GoogleSheetsClient)
        assert source.sheet_id == "s"
        assert source.timeout_seconds == 3.0

    @pytest.mark.parametrize(
        ("overrides", "missing"),
        [
            ({"api_key": None}, ["GOOGLE_SHEETS_API_KEY"]),
            ({"sheet_id": ""}, ["GOOGLE_SHEET_ID"]),
            ({"sheet_name": None, "api_key": None}, ["GOOGLE_SHEETS_API_KEY", "SHEET_NAME"]),
        ],
    )
    def test_missing_settings_raise_misconfigured(self, overrides: dict, missing: list[str]) -> None:
        values = {"api_key": "k", "sheet_id": "s", "sheet_name": "Tab", **overrides}
        cfg = SheetsSettings.model_construct(**values)

        with pytest.raises(MisconfiguredError) as exc_info:
            create_grid_source(cfg)

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["missing"] == missing
