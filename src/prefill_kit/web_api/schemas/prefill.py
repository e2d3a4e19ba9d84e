"""
Prefill Schemas
===============
Request and response models for the prefill and transform endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List


class FieldIn(BaseModel):
    """One form field to prefill"""

    id: str = Field(default="", description="Form field id (not percent-encoded)")
    value: str = Field(default="", description="Value to prefill")
    label: str = Field(default="", description="Display label, never encoded")


class ConstructRequest(BaseModel):
    """Build a prefill URL"""

    base_url: str = Field(..., description="Form URL to append parameters to")
    fields: List[FieldIn] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "base_url": "https://form.gov.sg/67488b8b1210a416d2d7cb5b",
                "fields": [{"id": "67488bb37e8c75e33b9f9191", "value": "Jane Doe"}],
            }
        }


class ConstructResponse(BaseModel):
    """``url`` is null when no field had both an id and a value"""

    url: Optional[str] = None


class UrlRequest(BaseModel):
    url: str = Field(..., description="URL to parse or validate")


class ParseResponse(BaseModel):
    base_url: str
    params: List[FieldIn] = Field(default_factory=list)


class ValidateResponse(BaseModel):
    valid: bool


class BatchRequest(BaseModel):
    """Generate one prefill link per value in a batch template"""

    form_url: str = Field(..., description="https://form.gov.sg/<24-hex form id>")
    csv_text: str = Field(..., description="Template CSV with FieldID, values, description")
    values_delimiter: Optional[str] = Field(
        default=None, description="Delimiter inside the values column; detected when omitted"
    )
    include_url: bool = Field(default=True)
    label_field: str = Field(default="none", description="none, index, or a FieldID")
    additional_fields: List[str] = Field(default_factory=list)


class GeneratedLinkOut(BaseModel):
    url: str
    label: int
    fields: Dict[str, Any] = Field(default_factory=dict)


class BatchResponse(BaseModel):
    count: int
    values_delimiter: str
    links: List[GeneratedLinkOut] = Field(default_factory=list)


class TransformRequest(BaseModel):
    """Reshape delimited text"""

    text: str = Field(..., description="Input text")
    delimiter: str = Field(default=",", description="Delimiter; \\t means tab")
    options: Optional[Dict[str, Any]] = Field(
        default=None, description="Cleaning options; defaults depend on direction"
    )

    class Config:
        json_schema_extra = {
            "example": {"text": "a\n\nb\nc", "delimiter": ","}
        }


class TransformResponse(BaseModel):
    output: str
    count: int


class MatchNamesRequest(BaseModel):
    names: List[str] = Field(default_factory=list)
    candidates: List[str] = Field(default_factory=list)
    threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    require_same_word_count: bool = False
    strict_short_names: bool = True


class NameMatchOut(BaseModel):
    name: str
    match: Optional[str] = None
    score: float = 0.0
    all_matches: List[Dict[str, Any]] = Field(default_factory=list)
