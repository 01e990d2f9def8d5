"""
Domain layer - Pure business logic with zero framework imports.

This package contains record types, request validators, the Failure type
and the error pipeline. It defines its own port interfaces for
infrastructure abstraction.
"""

from .exceptions import (
    MalformedRequestError,
    NotFoundError,
    ServiceError,
    StoreError,
    StoreParseError,
    StoreReadError,
    ValidationRejected,
)
from .failures import Failure, FailureKind
from .pipeline import (
    AlertingStage,
    ClassificationStage,
    DefaultStage,
    ErrorPipeline,
    LoggingStage,
    PipelineResponse,
)
from .ports import AlertMessage, AlertSender, ErrorLog, UserStore
from .records import (
    FieldError,
    LoginCredentials,
    RecordStore,
    RegisterCredentials,
    UserRecord,
)
from .validation import validate_login, validate_registration

__all__ = [
    "AlertMessage",
    "AlertSender",
    "AlertingStage",
    "ClassificationStage",
    "DefaultStage",
    "ErrorLog",
    "ErrorPipeline",
    "Failure",
    "FailureKind",
    "FieldError",
    "LoggingStage",
    "LoginCredentials",
    "MalformedRequestError",
    "NotFoundError",
    "PipelineResponse",
    "RecordStore",
    "RegisterCredentials",
    "ServiceError",
    "StoreError",
    "StoreParseError",
    "StoreReadError",
    "UserRecord",
    "UserStore",
    "ValidationRejected",
    "validate_login",
    "validate_registration",
]
