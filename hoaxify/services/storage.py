import asyncio
import base64
import binascii
import functools
import logging
import os
import typing
import filetype
import hoaxify.config
import hoaxify.errors
import hoaxify.utils

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = ("image/png", "image/jpeg")

STORED_NAME_LENGTH = 32


def profile_folder() -> str:
    settings = hoaxify.config.settings
    return os.path.join(settings.upload_dir, settings.profile_dir)


def attachment_folder() -> str:
    settings = hoaxify.config.settings
    return os.path.join(settings.upload_dir, settings.attachment_dir)


def create_folders() -> None:
    for folder in (hoaxify.config.settings.upload_dir, profile_folder(), attachment_folder()):
        os.makedirs(folder, exist_ok=True)


async def _run_blocking(func: typing.Callable, *args) -> typing.Any:
    return await asyncio.get_event_loop().run_in_executor(
        None,
        functools.partial(func, *args)
    )


def detect_type(content: bytes) -> typing.Optional[typing.Tuple[str, str]]:
    kind = filetype.guess(content)
    if kind is None:
        return None
    return kind.mime, kind.extension


def is_supported_image(content: bytes) -> bool:
    detected = detect_type(content)
    return detected is not None and detected[0] in SUPPORTED_IMAGE_TYPES


def decode_base64(data: str) -> bytes:
    if "," in data and data.startswith("data:"):
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise hoaxify.errors.ValidationFailed({"image": "Only JPEG or PNG files are allowed"})


def _write(path: str, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)


async def write_file(folder: str, filename: str, content: bytes) -> str:
    path = os.path.join(folder, filename)
    try:
        await _run_blocking(_write, path, content)
    except OSError as e:
        logger.error(f"Failed to write {path}: {str(e)}")
        raise hoaxify.errors.StorageFailure("File could not be stored") from e
    return path


async def save_profile_image(content: bytes) -> str:
    filename = hoaxify.utils.random_string(STORED_NAME_LENGTH)
    await write_file(profile_folder(), filename, content)
    return filename


def _unlink(path: str) -> bool:
    try:
        os.unlink(path)
    except FileNotFoundError:
        return False
    return True


async def remove_file(folder: str, filename: str) -> bool:
    """Unlink ``folder/filename``.

    Returns False when the file was already gone. Any other OS error is
    raised as StorageFailure.
    """
    path = os.path.join(folder, filename)
    try:
        return await _run_blocking(_unlink, path)
    except OSError as e:
        raise hoaxify.errors.StorageFailure(f"File could not be removed: {path}") from e


async def discard_file(folder: str, filename: str) -> bool:
    """Best-effort removal used on delete paths.

    Returns True when the file no longer exists afterwards, False when the
    removal failed. Failures are logged, never raised.
    """
    try:
        removed = await remove_file(folder, filename)
    except hoaxify.errors.StorageFailure as e:
        logger.warning(f"{e.message}: {str(e.__cause__)}")
        return False

    if not removed:
        logger.debug(f"File {filename} already absent from {folder}")
    return True


async def file_exists(folder: str, filename: str) -> bool:
    return await _run_blocking(os.path.isfile, os.path.join(folder, filename))
