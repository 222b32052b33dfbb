import typing
import pydantic


class ErrorDetail(pydantic.BaseModel):
    code: str
    message: str
    details: typing.Dict[str, typing.Any] = pydantic.Field(default_factory=dict)


class APIResponse(pydantic.BaseModel):
    success: bool
    data: typing.Optional[typing.Any] = None
    error: typing.Optional[ErrorDetail] = None

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {"key": "value"},
                "error": None
            }
        }
    )


class UserSchema(pydantic.BaseModel):
    id: int
    username: str
    email: str
    image: typing.Optional[str] = None


class AuthData(pydantic.BaseModel):
    id: int
    username: str
    image: typing.Optional[str] = None
    token: str


class AuthResponse(pydantic.BaseModel):
    success: bool = True
    data: AuthData
    error: typing.Optional[ErrorDetail] = None


class AttachmentSchema(pydantic.BaseModel):
    filename: str
    file_type: typing.Optional[str] = None


class HoaxSchema(pydantic.BaseModel):
    id: int
    content: str
    timestamp: int
    user: UserSchema
    file_attachment: typing.Optional[AttachmentSchema] = None


class UserPage(pydantic.BaseModel):
    content: typing.List[UserSchema]
    page: int
    size: int
    total_pages: int


class HoaxPage(pydantic.BaseModel):
    content: typing.List[HoaxSchema]
    page: int
    size: int
    total_pages: int


class UserPageResponse(pydantic.BaseModel):
    success: bool = True
    data: UserPage
    error: typing.Optional[ErrorDetail] = None


class HoaxPageResponse(pydantic.BaseModel):
    success: bool = True
    data: HoaxPage
    error: typing.Optional[ErrorDetail] = None


class AttachmentCreated(pydantic.BaseModel):
    id: int


class AttachmentCreatedResponse(pydantic.BaseModel):
    success: bool = True
    data: AttachmentCreated
    error: typing.Optional[ErrorDetail] = None


class HealthResponse(pydantic.BaseModel):
    status: str
    service: str
    version: str
    timestamp: str


class DeepHealthResponse(pydantic.BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    dependencies: typing.Dict[str, str]
