import logging
import os
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from config import settings
from database import create_tables
from exceptions import (
    BackingStoreUnavailable,
    InvalidStateError,
    NotFoundError,
    ReferencedError,
    ValidationError,
)
from crud.api.v1.endpoints import customers, dashboard, inventory, login, public, rentals, site_config

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("rental_shop")

app = FastAPI(title="Rental Shop API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def exception_handling(request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception("Error processing %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": f"Internal server error occurred: {str(e)}"}
        )

def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(422, exc)

@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    logger.warning("Invalid rental state on %s: %s", request.url.path, exc)
    return _error_response(409, exc)

@app.exception_handler(ReferencedError)
async def referenced_handler(request: Request, exc: ReferencedError):
    return _error_response(409, exc)

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(404, exc)

@app.exception_handler(BackingStoreUnavailable)
async def backing_store_handler(request: Request, exc: BackingStoreUnavailable):
    logger.error("Backing store unavailable: %s", exc)
    return _error_response(503, exc)

@app.exception_handler(OperationalError)
async def database_error_handler(request: Request, exc: OperationalError):
    logger.error("Database error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Cannot reach the database. Check the connection settings and network."}
    )

create_tables()

app.include_router(login.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(inventory.router, prefix="/api/v1/inventory", tags=["inventory"])
app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])
app.include_router(rentals.router, prefix="/api/v1/rentals", tags=["rentals"])
app.include_router(site_config.router, prefix="/api/v1/site-config", tags=["site-config"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])
app.include_router(public.router, prefix="/api/v1/public", tags=["public"])


@app.get("/health", tags=["system"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}

if __name__ == '__main__':
    port = int(os.environ.get("PORT", 8000))

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=False)
