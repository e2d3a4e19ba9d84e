"""
API Routers
===========
Each router handles a specific domain of the API.
"""
from . import batches, health, letters, prefill, transform

__all__ = ["batches", "health", "letters", "prefill", "transform"]
