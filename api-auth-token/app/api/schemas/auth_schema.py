# app/api/schemas/auth_schema.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignInRequest(BaseModel):
    username: str = Field(min_length=1, max_length=20)
    password: str = Field(min_length=1, max_length=120)


class SignUpRequest(BaseModel):
    username: str = Field(min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(min_length=6, max_length=40)
    role: set[str] | None = None


class AccessTokenRequest(_CamelModel):
    refresh_token: str | None = None


class UserInfoResponse(_CamelModel):
    user_id: int
    username: str
    email: str
    roles: list[str]
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


class AccessTokenResponse(_CamelModel):
    message: str
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


class MessageResponse(BaseModel):
    message: str
