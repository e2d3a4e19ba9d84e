"""
Transform Router
================
Column/row reshaping and name matching.
"""
from typing import List

from fastapi import APIRouter, HTTPException

from prefill_kit.errors import TransformError
from prefill_kit.model import TransformDirection
from prefill_kit.transform import CleaningOptions, match_names, transform
from prefill_kit.web_api.schemas.prefill import (
    MatchNamesRequest,
    NameMatchOut,
    TransformRequest,
    TransformResponse,
)

router = APIRouter()


def _run(request: TransformRequest, direction: TransformDirection) -> TransformResponse:
    options = CleaningOptions.from_dict(request.options) if request.options is not None else None
    try:
        result = transform(request.text, request.delimiter, direction, options)
    except TransformError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return TransformResponse(**result.to_dict())


@router.post("/column-to-row", response_model=TransformResponse)
async def column_to_row(request: TransformRequest):
    """Join non-blank lines with the delimiter."""
    return _run(request, TransformDirection.COLUMN_TO_ROW)


@router.post("/row-to-column", response_model=TransformResponse)
async def row_to_column(request: TransformRequest):
    """Split on the delimiter, one item per line."""
    return _run(request, TransformDirection.ROW_TO_COLUMN)


@router.post("/match-names", response_model=List[NameMatchOut])
async def match(request: MatchNamesRequest):
    results = match_names(
        request.names,
        request.candidates,
        threshold=request.threshold,
        require_same_word_count=request.require_same_word_count,
        strict_short_names=request.strict_short_names,
    )
    return [NameMatchOut(**r.to_dict()) for r in results]
