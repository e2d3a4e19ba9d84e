"""
Prefill Kit Web API
===================
FastAPI-based REST API for prefill URLs and the Letters API proxy.

Quick Start:
    uvicorn prefill_kit.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
