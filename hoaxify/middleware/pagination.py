import typing
import fastapi
import hoaxify.config


class Page(typing.NamedTuple):
    page: int
    size: int


async def get_pagination(
    page: typing.Optional[str] = fastapi.Query(default=None),
    size: typing.Optional[str] = fastapi.Query(default=None)
) -> Page:
    """Lenient paging: unparsable or out-of-range values fall back to defaults."""
    settings = hoaxify.config.settings

    try:
        page_number = int(page) if page is not None else 0
    except ValueError:
        page_number = 0
    if page_number < 0:
        page_number = 0

    try:
        page_size = int(size) if size is not None else settings.default_page_size
    except ValueError:
        page_size = settings.default_page_size
    if page_size < 1 or page_size > settings.max_page_size:
        page_size = settings.default_page_size

    return Page(page=page_number, size=page_size)
