"""
prefill_kit.letters.client
==========================

Thin async client for the Letters API (letters.gov.sg).

Each call opens its own ``httpx.AsyncClient``: one outbound request per
invocation, no retries, and no timeout unless one is configured.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from prefill_kit.letters.errors import LettersAPIError, format_upstream_message

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://letters.gov.sg/api/v1"


@dataclass(frozen=True, slots=True)
class UpstreamResponse:
    """Status code and decoded JSON body of a Letters API response."""

    status_code: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class LettersClient:
    """Authenticated access to the Letters API endpoints the proxy exposes."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> UpstreamResponse:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(method, url, json=payload, params=params)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise LettersAPIError(
                f"Letters API returned a non-JSON response (status {response.status_code})",
                upstream_status=response.status_code,
            ) from exc

        logger.info(f"Letters API {method} {path} -> {response.status_code}")
        return UpstreamResponse(status_code=response.status_code, data=data)

    # ── passthrough endpoints ───────────────────────────────────────

    async def create_letter(self, payload: Any) -> UpstreamResponse:
        return await self._request("POST", "/letters", payload=payload)

    async def create_bulk(self, payload: Any) -> UpstreamResponse:
        return await self._request("POST", "/letters/bulks", payload=payload)

    async def list_templates(
        self, limit: Optional[str] = None, offset: Optional[str] = None
    ) -> UpstreamResponse:
        params = {k: v for k, v in (("limit", limit), ("offset", offset)) if v}
        return await self._request("GET", "/templates", params=params or None)

    async def get_template(self, template_id: str) -> UpstreamResponse:
        return await self._request("GET", f"/templates/{_segment(template_id)}")

    async def get_letter(self, public_id: str) -> UpstreamResponse:
        return await self._request("GET", f"/letters/{_segment(public_id)}")

    async def get_letter_pdfs(self, public_id: str) -> UpstreamResponse:
        return await self._request("GET", f"/letters/{_segment(public_id)}/pdfs")

    async def get_batch(self, batch_id: str) -> UpstreamResponse:
        return await self._request("GET", f"/batches/{_segment(batch_id)}")

    # ── preview ─────────────────────────────────────────────────────

    async def preview(self, template_id: Union[int, str], letter_params: dict[str, Any]) -> str:
        """Issue a letter without notifications and return its HTML.

        Raises
        ------
        LettersAPIError
            If the upstream rejects the request or omits ``issuedLetter``.
        """
        # No notificationParams: a preview must never notify recipients.
        payload = {"templateId": template_id, "letterParams": letter_params}
        logger.debug(f"Sending preview request: {json.dumps(payload)}")

        result = await self.create_letter(payload)
        if not result.ok:
            logger.error(f"Letters API error: {result.data}")
            raise LettersAPIError(
                format_upstream_message(result.data, result.status_code),
                upstream_status=result.status_code,
            )

        html = result.data.get("issuedLetter") if isinstance(result.data, dict) else None
        if not isinstance(html, str) or not html:
            logger.error("issuedLetter missing or not HTML in Letters API response")
            raise LettersAPIError("Could not retrieve preview HTML from the API.")
        return html
