import datetime
import secrets
import string
import bcrypt
import hoaxify.config

_ALPHABET = string.ascii_letters + string.digits


def random_string(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def utcnow() -> datetime.datetime:
    # naive UTC, matching the TIMESTAMP columns
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def epoch_millis(moment: datetime.datetime = None) -> int:
    moment = moment or utcnow()
    return int(moment.replace(tzinfo=datetime.timezone.utc).timestamp() * 1000)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(
        plain.encode("utf-8"),
        bcrypt.gensalt(rounds=hoaxify.config.settings.bcrypt_rounds)
    ).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
