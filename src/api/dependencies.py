"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories that read the collaborators
stored on app.state, decode request bodies, and run the request
validators. A validator that reports errors short-circuits the request
with ValidationRejected before the route handler runs.
"""

import json
import logging
from typing import Any, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError

from src.api.models import LoginRequest, RegisterRequest
from src.domain.exceptions import MalformedRequestError, StoreReadError, ValidationRejected
from src.domain.pipeline import ErrorPipeline
from src.domain.ports import UserStore
from src.domain.records import FieldError, LoginCredentials, RecordStore, RegisterCredentials
from src.domain.validation import validate_login, validate_registration

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_user_store(request: Request) -> UserStore:
    """
    Get the record store accessor from app state.

    The accessor is created by create_app() and stored in app.state.
    """
    return request.app.state.user_store


def get_error_pipeline(request: Request) -> ErrorPipeline:
    """Get the error pipeline from app state."""
    return request.app.state.error_pipeline


async def read_payload(request: Request) -> dict[str, Any]:
    """
    Decode a JSON or form body into a plain dict.

    An empty body, or one of another content type, yields an empty dict.

    Raises:
        MalformedRequestError: If a JSON body cannot be decoded or is not an object
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if media_type == "application/json":
        body = await request.body()
        if not body:
            return {}
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise MalformedRequestError(f"Malformed JSON body: {e}") from e
        if not isinstance(payload, dict):
            raise MalformedRequestError("JSON body must be an object")
        return payload

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    return {}


def parse_model(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    """
    Validate a payload against a request model.

    Type errors are reported as field errors, the same way validators
    report business rule violations.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = [
            FieldError(".".join(str(loc) for loc in err["loc"]) or "body", err["msg"])
            for err in e.errors()
        ]
        raise ValidationRejected(errors) from None


async def get_register_credentials(request: Request) -> RegisterCredentials:
    """Decode registration credentials from the request body."""
    payload = await read_payload(request)
    return parse_model(RegisterRequest, payload).to_credentials()


async def get_login_credentials(request: Request) -> LoginCredentials:
    """Decode login credentials from the request body."""
    payload = await read_payload(request)
    return parse_model(LoginRequest, payload).to_credentials()


def validate_register_request(
    credentials: RegisterCredentials = Depends(get_register_credentials),
    store: UserStore = Depends(get_user_store),
) -> RegisterCredentials:
    """
    Run the registration validator against a blocking store read.

    Declared as a plain function, so FastAPI runs it in a worker thread.
    Store errors are not caught and reach the error pipeline.

    Raises:
        ValidationRejected: If the email is taken or the passwords differ
    """
    records = store.load()
    errors = validate_registration(credentials, records)
    if errors:
        raise ValidationRejected(errors)
    return credentials


async def validate_login_request(
    credentials: LoginCredentials = Depends(get_login_credentials),
    store: UserStore = Depends(get_user_store),
) -> LoginCredentials:
    """
    Run the login validator against a non-blocking store read.

    An unreadable store is reported to the client as a ``file`` error.
    Malformed store content is a server fault and reaches the error pipeline.

    Raises:
        ValidationRejected: If the store is unreadable or the email is unknown
    """
    records: RecordStore | None
    try:
        records = await store.load_async()
    except StoreReadError as e:
        logger.warning("Login could not read the record store: %s", e)
        records = None

    errors = validate_login(credentials, records)
    if errors:
        raise ValidationRejected(errors)
    return credentials
