from hoaxify.models.base import Base
from hoaxify.models.user import User
from hoaxify.models.token import Token
from hoaxify.models.hoax import Hoax
from hoaxify.models.attachment import FileAttachment

__all__ = [
    "Base",
    "User",
    "Token",
    "Hoax",
    "FileAttachment",
]
