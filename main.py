import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import uvicorn

from routers import developments_router, parameters_router, units_router
from services.exceptions import (
    ActivationTransactionError,
    InvalidUnitError,
    NoActiveParameterError,
    NotFoundError,
    PricingError,
)

# Load .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title="Unit Pricing API")

# CORS
origins = os.getenv("CORS_ORIGINS", "").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(developments_router)
app.include_router(parameters_router)
app.include_router(units_router)

PRICING_ERROR_STATUS = {
    NotFoundError: 404,
    InvalidUnitError: 422,
    NoActiveParameterError: 409,
    ActivationTransactionError: 409,
}


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    status_code = 400
    for error_type, code in PRICING_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code != 404:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


# 404 Fallback Middleware
@app.middleware("http")
async def not_found_middleware(request: Request, call_next):
    try:
        response = await call_next(request)
        # Only unmatched paths; handlers' own 404s keep their body
        if response.status_code == 404 and "endpoint" not in request.scope:
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return response
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/health")
def health():
    from database import check_connection
    return {"status": "ok", "database": check_connection()}


if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
