"""Tests for the Letters API client and its error classification."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from prefill_kit.errors import PrefillError
from prefill_kit.letters import (
    DEFAULT_BASE_URL,
    LettersAPIError,
    LettersClient,
    classify_error_message,
    format_upstream_message,
)

LETTERS_URL = f"{DEFAULT_BASE_URL}/letters"


# ── error classification ────────────────────────────────────────────


class TestClassifyErrorMessage:
    @pytest.mark.parametrize(
        "message, status",
        [
            ("Template not found", 404),
            ("Invalid letter params: Item 0: (missing) name", 400),
            ("Invalid attribute supplied", 400),
            ("Missing param: name", 400),
            ("Unauthorized", 401),
            ("Invalid API key", 401),
            ("Something exploded", 500),
            ("", 500),
        ],
    )
    def test_status_by_phrase(self, message: str, status: int) -> None:
        assert classify_error_message(message) == status


class TestFormatUpstreamMessage:
    def test_message_with_item_errors(self) -> None:
        data = {
            "message": "Invalid letter params",
            "errors": [
                {"id": 0, "errorType": "missing", "message": "name is required"},
                {"id": 1, "errorType": "invalid", "message": "bad date"},
            ],
        }
        assert format_upstream_message(data, 400) == (
            "Invalid letter params: Item 0: (missing) name is required; "
            "Item 1: (invalid) bad date"
        )

    def test_fallback_when_body_has_no_message(self) -> None:
        assert format_upstream_message({}, 502) == "Request failed with status 502"
        assert format_upstream_message(None, 503) == "Request failed with status 503"

    def test_error_is_a_prefill_error(self) -> None:
        err = LettersAPIError("nope", upstream_status=400)
        assert isinstance(err, PrefillError)
        assert err.upstream_status == 400
        assert str(err) == "nope"


# ── client ──────────────────────────────────────────────────────────


class TestPreview:
    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_issued_letter_html(self) -> None:
        route = respx.post(LETTERS_URL).mock(
            return_value=httpx.Response(201, json={"issuedLetter": "<p>Hello Jane</p>"})
        )
        html = await LettersClient("secret").preview(42, {"name": "Jane"})

        assert html == "<p>Hello Jane</p>"
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {"templateId": 42, "letterParams": {"name": "Jane"}}

    @pytest.mark.asyncio
    @respx.mock
    async def test_upstream_error_is_formatted(self) -> None:
        respx.post(LETTERS_URL).mock(
            return_value=httpx.Response(
                400,
                json={
                    "message": "Invalid letter params",
                    "errors": [{"id": 0, "errorType": "missing", "message": "name"}],
                },
            )
        )
        with pytest.raises(LettersAPIError) as excinfo:
            await LettersClient("secret").preview(42, {})

        assert str(excinfo.value) == "Invalid letter params: Item 0: (missing) name"
        assert excinfo.value.upstream_status == 400

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_html(self) -> None:
        respx.post(LETTERS_URL).mock(return_value=httpx.Response(201, json={"publicId": "x"}))
        with pytest.raises(LettersAPIError, match="Could not retrieve preview HTML"):
            await LettersClient("secret").preview(42, {})

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_string_html(self) -> None:
        respx.post(LETTERS_URL).mock(
            return_value=httpx.Response(201, json={"issuedLetter": {"html": 1}})
        )
        with pytest.raises(LettersAPIError, match="Could not retrieve preview HTML"):
            await LettersClient("secret").preview(42, {})

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_response(self) -> None:
        respx.post(LETTERS_URL).mock(return_value=httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(LettersAPIError, match="non-JSON response"):
            await LettersClient("secret").preview(42, {})


class TestPassthrough:
    @pytest.mark.asyncio
    @respx.mock
    async def test_status_and_body_are_returned(self) -> None:
        respx.get(f"{DEFAULT_BASE_URL}/letters/abc123").mock(
            return_value=httpx.Response(404, json={"message": "Letter not found"})
        )
        result = await LettersClient("secret").get_letter("abc123")

        assert result.status_code == 404
        assert result.ok is False
        assert result.data == {"message": "Letter not found"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_templates_forwards_pagination(self) -> None:
        route = respx.get(f"{DEFAULT_BASE_URL}/templates").mock(
            return_value=httpx.Response(200, json={"templates": [], "count": 0})
        )
        await LettersClient("secret").list_templates(limit="5", offset="10")

        params = route.calls.last.request.url.params
        assert params["limit"] == "5"
        assert params["offset"] == "10"

    @pytest.mark.asyncio
    @respx.mock
    async def test_custom_base_url(self) -> None:
        route = respx.get("https://letters.example/api/v1/batches/b-1").mock(
            return_value=httpx.Response(200, json={"batchId": "b-1"})
        )
        client = LettersClient("secret", base_url="https://letters.example/api/v1/")
        result = await client.get_batch("b-1")

        assert route.called
        assert result.ok

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_errors_propagate(self) -> None:
        respx.post(f"{DEFAULT_BASE_URL}/letters/bulks").mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        with pytest.raises(httpx.HTTPError):
            await LettersClient("secret").create_bulk({"templateId": 1})
