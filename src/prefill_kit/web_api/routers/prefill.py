"""
Prefill Router
==============
Endpoints for building, parsing and batch-generating prefill URLs.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from prefill_kit import batch as batch_api
from prefill_kit.codec import construct_url, parse_url, validate_url
from prefill_kit.errors import BatchError
from prefill_kit.model.field import Field
from prefill_kit.web_api.schemas.prefill import (
    BatchRequest,
    BatchResponse,
    ConstructRequest,
    ConstructResponse,
    FieldIn,
    GeneratedLinkOut,
    ParseResponse,
    UrlRequest,
    ValidateResponse,
)

router = APIRouter()


@router.post("/construct", response_model=ConstructResponse)
async def construct(request: ConstructRequest):
    """
    Build a prefill URL.

    Returns ``{"url": null}`` when no field has both an id and a value.
    """
    fields = [Field.from_dict(f.model_dump()) for f in request.fields]
    return ConstructResponse(url=construct_url(request.base_url, fields))


@router.post("/parse", response_model=ParseResponse)
async def parse(request: UrlRequest):
    """
    Split a prefill URL into its base URL and fields.
    """
    parsed = parse_url(request.url)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Please enter a valid URL")
    return ParseResponse(
        base_url=parsed.base_url,
        params=[FieldIn(id=p.id, value=p.value) for p in parsed.params],
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate(request: UrlRequest):
    return ValidateResponse(valid=validate_url(request.url))


@router.post("/batch", response_model=BatchResponse)
async def generate_batch(request: BatchRequest, format: Optional[str] = None):
    """
    Generate one link per value in a batch template.

    - **format=csv**: return the export CSV instead of JSON
    """
    delimiter = request.values_delimiter or batch_api.detect_values_delimiter(request.csv_text)
    try:
        columns = batch_api.load_columns(request.csv_text, delimiter)
        links = batch_api.generate_links(request.form_url, columns)
    except BatchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    if format == "csv":
        config = batch_api.ExportConfig(
            include_url=request.include_url,
            label_field=request.label_field,
            additional_fields=tuple(request.additional_fields),
        )
        return Response(
            content=batch_api.export_links_csv(links, columns, config),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=prefilled-links.csv"},
        )

    return BatchResponse(
        count=len(links),
        values_delimiter=delimiter,
        links=[GeneratedLinkOut(**link.to_dict()) for link in links],
    )


@router.get("/template")
async def download_template():
    """Example batch template CSV."""
    return Response(
        content=batch_api.template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=form-prefill-template.csv"},
    )
