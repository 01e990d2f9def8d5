"""
Request validators - Pure checks of credentials against the record store.

Validators never raise and never touch I/O. They return the ordered list
of field errors; an empty list means the request may proceed.
"""

from .records import FieldError, LoginCredentials, RecordStore, RegisterCredentials

EMAIL_NOT_UNIQUE = FieldError("email", "email must be unique")
PASSWORD_MISMATCH = FieldError("password", "passwords do not match")
EMAIL_NOT_FOUND = FieldError("email", "Email not found")
STORE_UNAVAILABLE = FieldError("file", "Server Error")


def validate_registration(
    credentials: RegisterCredentials, records: RecordStore
) -> list[FieldError]:
    """
    Validate a registration attempt.

    Both checks always run, so a request may fail with two errors at once.
    The email error, when present, comes first.

    Args:
        credentials: Submitted registration payload
        records: Snapshot of the record store

    Returns:
        Ordered list of field errors (empty when valid)
    """
    errors: list[FieldError] = []
    if records.has_email(credentials.email):
        errors.append(EMAIL_NOT_UNIQUE)
    if credentials.password != credentials.confirm_password:
        errors.append(PASSWORD_MISMATCH)
    return errors


def validate_login(
    credentials: LoginCredentials, records: RecordStore | None
) -> list[FieldError]:
    """
    Validate a login attempt.

    ``records`` is None when the store could not be read. The store error
    replaces the email check instead of being reported alongside it.
    """
    if records is None:
        return [STORE_UNAVAILABLE]
    if not records.has_email(credentials.email):
        return [EMAIL_NOT_FOUND]
    return []
