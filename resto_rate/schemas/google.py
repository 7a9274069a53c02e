"""Google OAuth payloads."""

from pydantic import BaseModel, ConfigDict


class GoogleTokens(BaseModel):
    """Token endpoint response."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    id_token: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
    token_type: str = "Bearer"  # noqa: S105


class GoogleUserInfo(BaseModel):
    """Userinfo endpoint response (oauth2/v2)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    verified_email: bool = False
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    locale: str | None = None
