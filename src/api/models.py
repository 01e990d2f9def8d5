"""
API request models.

Pydantic models for request body validation. Fields are optional: a
missing email is simply never found in the store, and two missing
passwords are considered matching.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.records import LoginCredentials, RegisterCredentials


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(
        None, alias="confirmPassword", description="Must equal password"
    )

    def to_credentials(self) -> RegisterCredentials:
        return RegisterCredentials(
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
        )


class LoginRequest(BaseModel):
    """Request model for login by email address."""

    email: str | None = None

    def to_credentials(self) -> LoginCredentials:
        return LoginCredentials(email=self.email)
