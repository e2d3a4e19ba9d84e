"""
Pydantic Schemas
===============
Request and response models for the API.
"""
from .letters import (
    ErrorResponse,
    PreviewRequest,
    PreviewResponse,
    RecipientsMapRequest,
    RecipientsMapResponse,
)
from .prefill import (
    BatchRequest,
    BatchResponse,
    ConstructRequest,
    ConstructResponse,
    FieldIn,
    MatchNamesRequest,
    NameMatchOut,
    ParseResponse,
    TransformRequest,
    TransformResponse,
    UrlRequest,
    ValidateResponse,
)

__all__ = [
    "ErrorResponse",
    "PreviewRequest",
    "PreviewResponse",
    "RecipientsMapRequest",
    "RecipientsMapResponse",
    "BatchRequest",
    "BatchResponse",
    "ConstructRequest",
    "ConstructResponse",
    "FieldIn",
    "MatchNamesRequest",
    "NameMatchOut",
    "ParseResponse",
    "TransformRequest",
    "TransformResponse",
    "UrlRequest",
    "ValidateResponse",
]
