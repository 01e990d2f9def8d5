"""
API routes - Registration, login, fault injection and the catch-all.

Defines the HTTP endpoints:
- POST /register - Register (validation only, nothing is stored)
- POST /login - Log in by email address
- GET /panic/sync - Fail while handling the request
- GET /panic/async - Fail after an awaited operation settles
- any other path or method - Not found, answered by the error pipeline
"""

import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from src.api.dependencies import validate_login_request, validate_register_request
from src.domain.exceptions import NotFoundError
from src.domain.records import LoginCredentials, RegisterCredentials

router = APIRouter()

REGISTERED_MESSAGE = "Thank you for registering"
LOGGED_IN_MESSAGE = "Successful, You are now Logged In"

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

_validation_responses = {
    422: {
        "description": "Validation error: ordered list of {field: message} objects",
        "content": {"application/json": {"example": [{"password": "passwords do not match"}]}},
    },
}


@router.post(
    "/register",
    response_class=PlainTextResponse,
    responses=_validation_responses,
    summary="Register a new user",
    description="Checks that the email is unique and that both passwords match. "
    "Nothing is persisted.",
)
async def register(
    credentials: RegisterCredentials = Depends(validate_register_request),
) -> str:
    """Acknowledge a registration that passed validation."""
    return REGISTERED_MESSAGE


@router.post(
    "/login",
    response_class=PlainTextResponse,
    responses=_validation_responses,
    summary="Log in by email address",
)
async def login(
    credentials: LoginCredentials = Depends(validate_login_request),
) -> str:
    """Acknowledge a login whose email exists in the store."""
    return LOGGED_IN_MESSAGE


@router.get("/panic/sync", response_class=PlainTextResponse, include_in_schema=False)
async def panic_sync() -> str:
    raise RuntimeError("synchronous error")


@router.get("/panic/async", response_class=PlainTextResponse, include_in_schema=False)
async def panic_async() -> str:
    await _reject_later(RuntimeError("asynchronous error"))
    return ""


async def _reject_later(exc: Exception) -> None:
    """Await a future that is rejected on a later event loop iteration."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future[None] = loop.create_future()
    loop.call_soon(future.set_exception, exc)
    await future


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_found(request: Request) -> None:
    # Must stay the last route on the router.
    raise NotFoundError(f"Page not found on this path: {original_url(request)}")


def original_url(request: Request) -> str:
    """Path plus query string, as requested."""
    url = request.url
    return f"{url.path}?{url.query}" if url.query else url.path
