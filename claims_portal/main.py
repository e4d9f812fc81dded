import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import engine
from .rules import ClaimValidationError
from .routers import (
    assessors_router,
    assist_router,
    auth_router,
    claims_router,
    notes_router,
    payments_router,
    policies_router,
    uploads_router,
    users_router,
)
from .utils.migrations import get_migration_state, run_migrations_if_enabled

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Leasehold Buildings Insurance Claims Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    run_migrations_if_enabled(engine)


@app.exception_handler(ClaimValidationError)
async def claim_validation_handler(request: Request, exc: ClaimValidationError):
    logger.info(f"Claim validation failed: path={request.url.path} fields={exc.paths}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": [e.to_dict() for e in exc.errors],
            "step": exc.step,
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"path": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(auth_router)
app.include_router(claims_router)
app.include_router(notes_router)
app.include_router(payments_router)
app.include_router(users_router)
app.include_router(policies_router)
app.include_router(assessors_router)
app.include_router(uploads_router)
app.include_router(assist_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/health/migrations")
def migration_health():
    return get_migration_state(engine)
