import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health, rpc, tokens
from .config import settings
from .errors import PortfolioError, ValidationError
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .types import ErrorDetail, ErrorResponse

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wallet Portfolio API",
    description="Read-only wallet balances, prices and totals",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router, tags=["Health"])
app.include_router(tokens.router, tags=["Tokens"])
app.include_router(rpc.router, tags=["RPC"])


def error_response(exc: PortfolioError) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail.model_validate(exc.to_dict()))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers={"cache-control": "no-store"},
    )


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        logger.info("request rejected", extra={"path": request.url.path, "reason": exc.message})
    else:
        logger.warning(
            "request failed",
            extra={"path": request.url.path, "kind": exc.kind, "reason": exc.message},
        )
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    return error_response(ValidationError(f"Invalid or missing fields: {', '.join(fields)}"))


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Wallet Portfolio API",
        "version": "0.1.0",
        "description": "Read-only wallet balances, prices and totals",
        "network": settings.default_network,
        "docs": "/docs",
        "health": "/healthz",
        "endpoints": {
            "tokens": "POST /api/tokens",
            "rpcProxy": "POST /api/rpc",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "portfolio_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
