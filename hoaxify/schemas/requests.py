import re
import typing
import pydantic

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9]).*$")


def validate_password(value: typing.Optional[str]) -> str:
    if not value:
        raise ValueError("Password cannot be null")
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    if not _PASSWORD_PATTERN.match(value):
        raise ValueError("Password must have at least 1 uppercase, 1 lowercase letter and 1 number")
    return value


class RegisterRequest(pydantic.BaseModel):
    username: str = pydantic.Field(min_length=4, max_length=32)
    email: pydantic.EmailStr
    password: str

    @pydantic.field_validator("password")
    @classmethod
    def validate_password_complexity(cls, v: str) -> str:
        return validate_password(v)

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {
                "username": "user1",
                "email": "user1@mail.com",
                "password": "P4ssword"
            }
        }
    )


class LoginRequest(pydantic.BaseModel):
    email: typing.Optional[str] = None
    password: typing.Optional[str] = None

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {"email": "user1@mail.com", "password": "P4ssword"}
        }
    )


class UserUpdateRequest(pydantic.BaseModel):
    username: str = pydantic.Field(min_length=4, max_length=32)
    image: typing.Optional[str] = pydantic.Field(
        default=None, description="Profile image as base64, PNG or JPEG up to 2MB"
    )


class PasswordResetRequest(pydantic.BaseModel):
    email: pydantic.EmailStr


class PasswordUpdateRequest(pydantic.BaseModel):
    password: typing.Optional[str] = None
    password_reset_token: typing.Optional[str] = None


class HoaxSubmitRequest(pydantic.BaseModel):
    content: str = pydantic.Field(min_length=10, max_length=5000)
    file_attachment: typing.Optional[int] = None

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {"content": "Hoax content goes here", "file_attachment": 1}
        }
    )
