"""FastAPI app entrypoint."""
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cashflow.config import get_settings
from cashflow.logging import configure_logging, get_logger
from cashflow.middleware import BodyLimitMiddleware
from cashflow.routers import settlements
from cashflow.schemas import HealthResponse

settings = get_settings()
configure_logging(settings.log_level)
log = get_logger(__name__)

app = FastAPI(
    title="Cashflow Core API",
    description="Settle a group's net balances with as few payments as the greedy largest-first match finds.",
    version="1.0.0",
)
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(settlements.router)


def _validation_message(errors) -> str:
    """Map the first pydantic error onto a client-facing message."""
    if not errors:
        return "Invalid input"
    err = errors[0]
    if err.get("type") == "json_invalid":
        return "Invalid input: request body must be valid JSON"
    loc = [part for part in err.get("loc", ()) if part != "body"]
    if not loc or loc == ["members"]:
        return "Invalid input: members array is required"
    if err.get("type") == "finite_number":
        return "Invalid net amount: must be a finite number"
    return "Invalid member format: each member must have id (string) and net (number)"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _validation_message(exc.errors())})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == 404 and detail == "Not Found":
        detail = "Endpoint not found"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception("app.unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def root():
    return {"message": "Cashflow Core API", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(timestamp=datetime.now(timezone.utc))


def run() -> None:
    uvicorn.run("cashflow.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
