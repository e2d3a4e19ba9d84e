"""
Letters Schemas
===============
Request and response models for the Letters API proxy.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class PreviewRequest(BaseModel):
    """Preview a letter without notifying anyone"""

    templateId: Optional[Union[int, str]] = Field(
        default=None, description="Letters template id, forwarded as given"
    )
    letterParams: Optional[Dict[str, Any]] = Field(
        default=None, description="Template attribute values"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "templateId": 1234,
                "letterParams": {"name": "Jane Doe"},
            }
        }


class PreviewResponse(BaseModel):
    previewHtml: str


class ErrorResponse(BaseModel):
    message: str


class RecipientsMapRequest(BaseModel):
    """Map a recipients CSV onto template fields, optionally building a bulk body"""

    csv: str = Field(..., description="Recipients CSV text, one row per letter")
    fieldMapping: Dict[str, str] = Field(
        ..., description="Template field name -> CSV header"
    )
    templateId: Optional[Union[int, str]] = Field(
        default=None, description="When set, the bulk request body is built and checked"
    )
    requiredFields: List[str] = Field(default_factory=list)
    notificationMethod: Optional[str] = Field(default=None, description="SMS or EMAIL")
    recipients: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "csv": "Full Name,Email\nJane Doe,jane@agency.gov.sg\n",
                "fieldMapping": {"name": "Full Name"},
            }
        }


class RecipientsMapResponse(BaseModel):
    lettersParams: List[Dict[str, str]]
    count: int
    payload: Optional[Dict[str, Any]] = None
