from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# bcrypt only uses the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class AuthRequest(BaseModel):
    """Schema for registration and login requests"""
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)
    # JSON clients send "captcha"; the Turnstile widget posts "cf-turnstile-response"
    captcha: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("captcha", "cf-turnstile-response"),
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class TodoResponse(BaseModel):
    """Schema for todo response"""
    id: int
    username: str
    task: str
    done: bool

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


class StatusResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    """Body returned for every error"""
    error: str
