"""Cookie related exceptions."""

from typing import Any, Tuple

__all__ = (
    "CookieError",
    "InvalidName",
    "InvalidValue",
    "InvalidMaxAge",
    "InvalidSameSite",
    "UnparseableDate",
    "UnresolvableCookie",
)


class CookieError(ValueError):
    """Base class for cookie errors.

    :param value: the offending input.
    :param str message: (optional) human readable description.
    """

    message = "Invalid cookie"

    def __init__(self, value: Any = None, message: str = "") -> None:
        self.value = value
        if message:
            self.message = message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.message}>"

    def __reduce__(self) -> Tuple[Any, ...]:
        return type(self), (self.value, self.message)


class InvalidName(CookieError):
    message = "Invalid cookie name"


class InvalidValue(CookieError):
    message = "Invalid cookie value"


class InvalidMaxAge(CookieError):
    message = "Max-Age must be integer"


class InvalidSameSite(CookieError):
    message = "SameSite must be one of Strict, Lax or None"


class UnparseableDate(CookieError):
    message = "Unparseable cookie date string"


class UnresolvableCookie(CookieError, TypeError):
    message = "Expected cookie to be instance of Cookie"
