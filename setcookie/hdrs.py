"""HTTP Headers constants."""

from typing import Final

from multidict import istr

SET_COOKIE: Final[str] = istr("Set-Cookie")
