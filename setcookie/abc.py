from abc import abstractmethod
from collections.abc import Sized
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .cookie import Cookie

    IterableBase = Iterable[Cookie]
else:
    IterableBase = Iterable

ClearCookiePredicate = Callable[["Cookie"], bool]


class AbstractCookieJar(Sized, IterableBase):
    """Abstract Cookie Jar."""

    @abstractmethod
    def add_cookie(self, cookie: "Cookie") -> None:
        """Queue a cookie, replacing conflicting ones."""

    @abstractmethod
    def remove_cookie(self, cookie: "Cookie") -> None:
        """Drop a queued cookie."""

    @abstractmethod
    def get_cookies(self) -> List["Cookie"]:
        """Return all queued cookies."""

    @abstractmethod
    def clear(self, predicate: Optional[ClearCookiePredicate] = None) -> None:
        """Clear all cookies if no predicate is passed."""
