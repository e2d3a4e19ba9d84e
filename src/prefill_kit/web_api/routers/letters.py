"""
Letters Router
==============
Server-side proxy to the Letters API so the API key never has to be sent
to letters.gov.sg from a browser.

Errors are raised as ``HTTPException`` and rendered as ``{"message": ...}``
by the application's exception handler.
"""
import json
import logging
from typing import Any, Awaitable, Optional

import httpx
from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from prefill_kit.errors import RecipientsError
from prefill_kit.letters import (
    LettersAPIError,
    LettersClient,
    build_bulk_payload,
    classify_error_message,
    map_recipients,
)
from prefill_kit.letters.client import UpstreamResponse
from prefill_kit.web_api.config import settings
from prefill_kit.web_api.schemas.letters import (
    PreviewRequest,
    PreviewResponse,
    RecipientsMapRequest,
    RecipientsMapResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_OTHER_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
METHOD_NOT_ALLOWED = "Method not allowed"


def get_client(api_key: str) -> LettersClient:
    return LettersClient(
        api_key,
        base_url=settings.LETTERS_API_BASE_URL,
        timeout=settings.letters_timeout,
    )


def _reject_other_methods(path: str, allowed: str, *, name_method: bool = False) -> None:
    """Answer 405 for *path* on every method except *allowed*.

    The message is "Method not allowed", or "Method <METHOD> Not Allowed"
    when *name_method* is set.

    Registered before the ``/{public_id}`` routes so a GET on e.g.
    ``/preview`` is not mistaken for a letter lookup.
    """

    async def method_not_allowed(request: Request):
        detail = f"Method {request.method} Not Allowed" if name_method else METHOD_NOT_ALLOWED
        raise HTTPException(status_code=405, detail=detail, headers={"Allow": allowed})

    router.add_api_route(
        path,
        method_not_allowed,
        methods=[m for m in _OTHER_METHODS if m != allowed],
        include_in_schema=False,
    )


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")


def _require_api_key(x_api_key: Optional[str]) -> str:
    if not x_api_key:
        raise HTTPException(status_code=400, detail="API key is required")
    return x_api_key


async def _forward(call: Awaitable[UpstreamResponse], failure: str) -> JSONResponse:
    """Relay an upstream response as-is; transport failures become 500."""
    try:
        upstream = await call
    except (httpx.HTTPError, LettersAPIError) as e:
        logger.error(f"{failure}: {e}")
        raise HTTPException(status_code=500, detail=failure)
    return JSONResponse(content=upstream.data, status_code=upstream.status_code)


# ── preview ─────────────────────────────────────────────────────────


@router.post("/preview", response_model=PreviewResponse)
async def preview_letter(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
):
    """
    Render a letter for preview.

    - **templateId**: Letters template id
    - **letterParams**: values for the template's attributes

    The API key is checked before the body, and both before any upstream call.
    """
    if not x_api_key:
        raise HTTPException(status_code=401, detail="API key is missing")

    body = await _json_body(request)
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    try:
        payload = PreviewRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise HTTPException(status_code=400, detail=f"Invalid {where}: {first.get('msg')}")

    if not payload.templateId:
        raise HTTPException(status_code=400, detail="Template ID is required")
    if payload.letterParams is None:
        raise HTTPException(status_code=400, detail="Letter parameters are required")

    try:
        html = await get_client(x_api_key).preview(payload.templateId, payload.letterParams)
    except (LettersAPIError, httpx.HTTPError) as e:
        message = str(e) or "An unexpected error occurred"
        logger.error(f"Error in preview route: {message}")
        raise HTTPException(status_code=classify_error_message(message), detail=message)

    return PreviewResponse(previewHtml=html)


_reject_other_methods("/preview", "POST", name_method=True)


# ── passthrough ─────────────────────────────────────────────────────


@router.post("")
async def create_letter(request: Request, x_api_key: Optional[str] = Header(default=None)):
    """Create a single letter (body forwarded unchanged)."""
    api_key = _require_api_key(x_api_key)
    body = await _json_body(request)
    return await _forward(
        get_client(api_key).create_letter(body),
        "An error occurred while processing your request",
    )


@router.post("/bulks")
async def create_bulk(request: Request, x_api_key: Optional[str] = Header(default=None)):
    """Create letters in bulk. Upstream rate limiting surfaces as 429."""
    api_key = _require_api_key(x_api_key)
    body = await _json_body(request)
    logger.info("Proxying bulk letters request")
    try:
        upstream = await get_client(api_key).create_bulk(body)
    except (httpx.HTTPError, LettersAPIError) as e:
        logger.error(f"Error in bulk letters proxy: {e}")
        raise HTTPException(
            status_code=500,
            detail=str(e) or "An error occurred while processing your request",
        )

    if upstream.status_code == 429:
        logger.warning("Letters API rate limit exceeded")
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Please wait a moment before trying again.",
        )
    return JSONResponse(content=upstream.data, status_code=upstream.status_code)


_reject_other_methods("/bulks", "POST")


@router.post("/recipients/map", response_model=RecipientsMapResponse)
async def map_recipient_rows(
    body: RecipientsMapRequest,
    x_api_key: Optional[str] = Header(default=None),
):
    """
    Map a recipients CSV onto template fields.

    - **csv**: recipients CSV text
    - **fieldMapping**: template field name -> CSV header
    - **templateId**: when given, also build and check the ``/bulks`` body

    Nothing is sent upstream.
    """
    try:
        rows = map_recipients(body.csv, body.fieldMapping)
        payload = None
        if body.templateId is not None:
            notify = body.notificationMethod is not None or bool(body.recipients)
            payload = build_bulk_payload(
                body.templateId,
                rows,
                api_key=x_api_key,
                required_fields=body.requiredFields,
                notify=notify,
                notification_method=body.notificationMethod,
                recipients=body.recipients,
            )
    except RecipientsError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return RecipientsMapResponse(lettersParams=rows, count=len(rows), payload=payload)


@router.get("/templates")
async def list_templates(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    x_api_key: Optional[str] = Header(default=None),
):
    """List templates, optionally paginated."""
    api_key = _require_api_key(x_api_key)
    return await _forward(
        get_client(api_key).list_templates(limit=limit, offset=offset),
        "An error occurred while fetching the templates",
    )


_reject_other_methods("/templates", "GET")


@router.get("/templates/{template_id}")
async def get_template(template_id: str, x_api_key: Optional[str] = Header(default=None)):
    """Fetch one template, including its fields."""
    api_key = _require_api_key(x_api_key)
    return await _forward(
        get_client(api_key).get_template(template_id),
        "An error occurred while fetching the template",
    )


@router.get("/{public_id}")
async def get_letter(public_id: str, x_api_key: Optional[str] = Header(default=None)):
    """Fetch letter metadata."""
    api_key = _require_api_key(x_api_key)
    return await _forward(
        get_client(api_key).get_letter(public_id),
        "An error occurred while fetching the letter metadata",
    )


@router.get("/{public_id}/pdfs")
async def get_letter_pdfs(public_id: str, x_api_key: Optional[str] = Header(default=None)):
    """Fetch the PDF download link of a letter."""
    api_key = _require_api_key(x_api_key)
    return await _forward(
        get_client(api_key).get_letter_pdfs(public_id),
        "An error occurred while getting the PDF download link",
    )
