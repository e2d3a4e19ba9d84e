"""
Batches Router
==============
Status of bulk letter batches on the Letters API.
"""
from typing import Optional

from fastapi import APIRouter, Header

from prefill_kit.web_api.routers.letters import _forward, _require_api_key, get_client

router = APIRouter()


@router.get("/{batch_id}")
async def get_batch(batch_id: str, x_api_key: Optional[str] = Header(default=None)):
    """Fetch the status of a bulk letter batch."""
    api_key = _require_api_key(x_api_key)
    return await _forward(
        get_client(api_key).get_batch(batch_id),
        "An error occurred while fetching the batch status",
    )
