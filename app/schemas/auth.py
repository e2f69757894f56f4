from pydantic import BaseModel

from app.schemas.context import Role


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    jwt: str


class UserRecord(BaseModel):
    username: str
    passwordHash: str
    role: Role
