# videotube/schemas/auth.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from videotube.schemas.user import AccountPublicView


# ──────────────── Register ────────────────
class RegisterPayload(BaseModel):
    """Fields stay optional so blank/missing input surfaces as a 400, not a 422."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    avatar: Optional[str] = Field(None, description="Uploaded avatar URL")
    cover_image: Optional[str] = Field(None, description="Uploaded cover image URL")


# ──────────────── Login ────────────────
class LoginRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class CredentialPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user: AccountPublicView
    access_token: str
    refresh_token: str


# ─────────────────────────────────────────
# 🔄 Refresh & Password
# ─────────────────────────────────────────
class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None
