from fastapi import Depends, Query, Request

from social_network.config import Settings, get_settings
from social_network.errors import TokenInvalidError, ValidationFailedError
from social_network.security import decode_token

_BEARER_PREFIX = "bearer "
_MAX_OFFSET = 2**63 - 1


class PaginationParams:
    """
    Reusable FastAPI dependency that parses the ``page`` query parameter.

    ``page`` arrives as a string and must be a positive integer; anything
    else raises ``ValidationFailedError`` before the handler touches the
    database.

    Attributes
    ----------
    page:
        1-based page number.
    page_size:
        ``settings.PAGE_SIZE``; clients cannot change it.
    """

    def __init__(
        self,
        page: str = Query("1", description="Page number (1-based)."),
        settings: Settings = Depends(get_settings),
    ) -> None:
        if not (page.isascii() and page.isdigit()):
            raise ValidationFailedError({"page": "Page is not a number"})
        number = int(page)
        if number < 1:
            raise ValidationFailedError({"page": "Page must be greater than zero"})
        # OFFSET is a signed 64-bit integer in every supported backend.
        if (number - 1) * settings.PAGE_SIZE > _MAX_OFFSET:
            raise ValidationFailedError({"page": "Page is out of range"})
        self.page = number
        self.page_size = settings.PAGE_SIZE


async def current_account_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Return the account id carried by the request token.

    The token is read from the header named by ``settings.TOKEN_HEADER``,
    either bare or with a ``Bearer`` prefix.
    """
    raw = request.headers.get(settings.TOKEN_HEADER, "").strip()
    if raw.lower().startswith(_BEARER_PREFIX):
        raw = raw[len(_BEARER_PREFIX):].strip()
    if not raw:
        raise TokenInvalidError()
    return decode_token(raw)
