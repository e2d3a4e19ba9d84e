"""
FastAPI Application
==================
Main entry point for the prefill-kit API.

Run with:
    uvicorn prefill_kit.web_api.main:app --reload
"""
import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prefill_kit import __version__
from prefill_kit.web_api.config import settings
from prefill_kit.web_api.routers import batches, health, letters, prefill, transform

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Create application
app = FastAPI(
    title="Prefill Kit API",
    description="Form prefill URLs, text transforms and a Letters API proxy",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as ``{"message": ...}``.

    A 405 raised by routing itself carries the stock status phrase and is
    answered with "Method not allowed".
    """
    message = exc.detail
    if exc.status_code == 405 and message == HTTPStatus.METHOD_NOT_ALLOWED.phrase:
        message = "Method not allowed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(prefill.router, prefix="/prefill", tags=["Prefill"])
app.include_router(transform.router, prefix="/transform", tags=["Transform"])
app.include_router(letters.router, prefix="/api/letters", tags=["Letters"])
app.include_router(batches.router, prefix="/api/batches", tags=["Letters"])


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "Prefill Kit API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


# For running directly: python -m prefill_kit.web_api.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
