"""
Main application entry point.

Business errors raised by the domain are mapped to structured JSON
responses by a single CatalogError handler; request-body validation errors
get the same envelope with code VALIDATION_ERROR.
"""

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookcatalog.api.v1.book_endpoints import router as book_router
from bookcatalog.api.v1.category_endpoints import router as category_router
from bookcatalog.api.v1.dependencies import LOG_LEVEL, get_book_repository
from bookcatalog.domain.errors import CatalogError
from bookcatalog.domain.ports import BookRepository

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Book Catalog API",
    description="Create, update, delete and search books and their categories.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include API routers
app.include_router(book_router, prefix="/api/v1", tags=["books"])
app.include_router(category_router, prefix="/api/v1", tags=["categories"])


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    """Map business errors to their HTTP status and error envelope."""
    logger.info(f"{exc.code.value} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with the same envelope."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "context": {
                    "details": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                            "type": e["type"],
                        }
                        for e in exc.errors()
                    ],
                },
            },
        },
    )


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Book Catalog API",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


@app.get("/api/v1/health")
def health_check(book_repo: BookRepository = Depends(get_book_repository)) -> dict:
    """Check that the store answers and report the catalog size."""
    return {"status": "ok", "books": book_repo.count()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bookcatalog.main:app", host="0.0.0.0", port=8000, reload=True)
