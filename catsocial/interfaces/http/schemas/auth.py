from __future__ import annotations

from pydantic import EmailStr, Field

from catsocial.interfaces.http.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    name: str = Field(min_length=5, max_length=50)
    password: str = Field(min_length=5, max_length=15)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=5, max_length=15)


class AuthData(CamelModel):
    email: EmailStr
    name: str
    access_token: str


class AuthResponse(CamelModel):
    message: str
    data: AuthData
