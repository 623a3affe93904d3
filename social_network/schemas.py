from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime

# bcrypt refuses passwords longer than 72 bytes.
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(v: str | None) -> str | None:
    if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


# --- Account ---

class AccountBase(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=150)
    description: str | None = None
    email: EmailStr


class AccountCreate(AccountBase):
    password: str = Field(min_length=4, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)


class AccountUpdate(BaseModel):
    username: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=4, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)


class AccountResponse(AccountBase):
    id: str
    created_at: datetime
    updated_at: datetime
    deleted: bool
    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str


class Token(BaseModel):
    token: str


# --- Post ---

class PostCreate(BaseModel):
    content: str = Field(min_length=1)


class PostUpdate(BaseModel):
    id: str
    content: str = Field(min_length=1)


class PostRemove(BaseModel):
    id: str


class PostResponse(BaseModel):
    id: str
    account_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    removed: bool
    model_config = ConfigDict(from_attributes=True)


# --- Comment ---

class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    comment_id: str | None = None


class CommentUpdate(BaseModel):
    id: str
    content: str = Field(min_length=1)


class CommentRemove(BaseModel):
    id: str


class CommentResponse(BaseModel):
    id: str
    account_id: str
    post_id: str
    comment_id: str | None = None
    content: str
    created_at: datetime
    updated_at: datetime
    removed: bool
    model_config = ConfigDict(from_attributes=True)


# --- Pagination ---

class PageResponse(BaseModel):
    items: list  # Typed by the caller
    page: int
    page_size: int
