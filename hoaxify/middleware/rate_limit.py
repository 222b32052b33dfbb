from slowapi import Limiter
from slowapi.util import get_remote_address
import hoaxify.config


def get_limiter() -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{hoaxify.config.settings.rate_limit_per_minute}/minute"],
        enabled=hoaxify.config.settings.rate_limit_enabled
    )


limiter = get_limiter()


def get_auth_limit() -> str:
    return f"{hoaxify.config.settings.rate_limit_auth_per_minute}/minute"
