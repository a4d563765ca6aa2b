from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from multidict import CIMultiDict
from yarl import URL

from . import hdrs
from .abc import AbstractCookieJar, ClearCookiePredicate
from .cookie import Cookie, SameSite
from .exceptions import UnresolvableCookie
from .helpers import normalize_domain, normalize_path
from .log import jar_logger
from .typedefs import LooseExpires, StrOrURL

__all__ = ("CookieJar",)

_CookieKey = Tuple[str, Optional[str], str]


class CookieJar(AbstractCookieJar):
    """Holds the set of cookies queued for a response.

    Cookies are stored by identity, the ``(name, domain, path)`` triple
    with the name compared case-insensitively, so the jar never holds two
    cookies for the same logical cookie. Iteration order is not part of
    the contract.

    The jar is not thread-safe; concurrent mutation has to be serialized
    by the caller.
    """

    def __init__(
        self,
        *,
        path: str = "/",
        domain: Optional[str] = None,
        secure: bool = False,
    ) -> None:
        self._cookies: Dict[_CookieKey, Cookie] = {}
        self.set_default_path_and_domain(path, domain, secure)

    def __repr__(self) -> str:
        return "<CookieJar path={!r} domain={!r} secure={!r} count={}>".format(
            self._path, self._domain, self._secure, len(self._cookies)
        )

    @property
    def default_path(self) -> str:
        return self._path

    @property
    def default_domain(self) -> Optional[str]:
        return self._domain

    @property
    def default_secure(self) -> bool:
        return self._secure

    def set_default_path_and_domain(
        self, path: str, domain: Optional[str], secure: bool = False
    ) -> "CookieJar":
        """Set the defaults applied to cookies which do not carry their own."""
        self._path = normalize_path(path)
        self._domain = normalize_domain(domain) or None
        self._secure = bool(secure)
        return self

    def set_defaults_from_url(self, url: StrOrURL) -> "CookieJar":
        """Derive default path, domain and secure flag from a request URL.

        The path default is the directory part of the URL path, as a user
        agent would compute it for a cookie without a Path attribute.
        """
        if not isinstance(url, URL):
            url = URL(url)

        path = url.path
        if not path.startswith("/"):
            path = "/"
        else:
            # Cut everything from the last slash to the end
            path = "/" + path[1 : path.rfind("/")]

        return self.set_default_path_and_domain(
            path, url.host, url.scheme in ("https", "wss")
        )

    def has_cookie(self, cookie: Cookie) -> bool:
        """Whether this exact cookie, every attribute included, is queued."""
        return self._cookies.get(cookie.key) == cookie

    def add_cookie(self, cookie: Cookie) -> None:
        """Queue a cookie.

        Stored cookies with the same identity are evicted when the new
        value differs or the new Max-Age is less restrictive. A cookie
        without a value only evicts, it is never stored itself.
        """
        self._store(self._resolve_cookie(cookie))

    def set_cookie(
        self,
        name: str,
        value: Optional[str],
        domain: Optional[str] = None,
        path: Optional[str] = None,
        max_age: Optional[int] = None,
        expires: LooseExpires = None,
        secure: Optional[bool] = None,
        discard: bool = False,
        http_only: bool = False,
        same_site: Union[str, SameSite, None] = None,
    ) -> Cookie:
        """Build a cookie from raw attributes and queue it.

        Returns the cookie as resolved against the jar defaults.
        """
        cookie = self._resolve_cookie(
            Cookie.from_fields(
                name,
                value,
                domain=domain,
                path=self._path if path is None else path,
                max_age=max_age,
                expires=expires,
                secure=secure,
                discard=discard,
                http_only=http_only,
                same_site=same_site,
            )
        )
        self._store(cookie)
        return cookie

    def remove_cookie(self, cookie: Cookie) -> None:
        self._cookies.pop(cookie.key, None)

    def get_cookie_by_name(self, name: str) -> Optional[Cookie]:
        name = name.lower()
        for key, cookie in self._cookies.items():
            if key[0] == name:
                return cookie
        return None

    def has_cookies(self) -> bool:
        return bool(self._cookies)

    def get_cookies(self) -> List[Cookie]:
        return list(self._cookies.values())

    def get_matching_cookies(self, cookie: Cookie) -> List[Cookie]:
        """Return queued cookies sharing the identity of ``cookie``."""
        match = self._cookies.get(cookie.key)
        return [] if match is None else [match]

    def has_queued_cookie(self, name: str) -> bool:
        return self.get_cookie_by_name(name) is not None

    def unqueue_cookie(self, name: str) -> None:
        cookie = self.get_cookie_by_name(name)
        if cookie is not None:
            self.remove_cookie(cookie)

    def clear(self, predicate: Optional[ClearCookiePredicate] = None) -> None:
        if predicate is None:
            self._cookies.clear()
            return

        to_del = [key for key, cookie in self._cookies.items() if predicate(cookie)]
        for key in to_del:
            del self._cookies[key]

    def clear_domain(self, domain: str) -> None:
        """Remove cookies set for ``domain`` and its subdomains."""
        domain = normalize_domain(domain) or ""
        self.clear(
            lambda cookie: cookie.domain is not None
            and self._is_domain_match(domain, cookie.domain)
        )

    def clear_expired(self, now: Optional[float] = None) -> None:
        self.clear(lambda cookie: cookie.is_expired(now))

    def count(self) -> int:
        return len(self._cookies)

    def output(self) -> List[str]:
        """Return one Set-Cookie header value per queued cookie."""
        return [cookie.output() for cookie in self._cookies.values()]

    def to_headers(self) -> "CIMultiDict[str]":
        headers: CIMultiDict[str] = CIMultiDict()
        for value in self.output():
            headers.add(hdrs.SET_COOKIE, value)
        return headers

    def __len__(self) -> int:
        return len(self._cookies)

    def __iter__(self) -> Iterator[Cookie]:
        return iter(list(self._cookies.values()))

    def __contains__(self, cookie: Any) -> bool:
        return isinstance(cookie, Cookie) and self.has_cookie(cookie)

    def _resolve_cookie(self, cookie: Cookie) -> Cookie:
        if not isinstance(cookie, Cookie):
            raise UnresolvableCookie(
                cookie,
                "Expected cookie to be instance of Cookie, got {}".format(
                    type(cookie).__name__
                ),
            )

        if cookie.domain is None and self._domain is not None:
            cookie = cookie.with_domain(self._domain)

        if cookie.secure is None:
            cookie = cookie.with_secure(self._secure)

        return cookie

    def _store(self, cookie: Cookie) -> None:
        if self.has_cookie(cookie):
            return

        for matching in self.get_matching_cookies(cookie):
            if cookie.value != matching.value or self._is_less_restrictive(
                cookie, matching
            ):
                jar_logger.debug("Evicting cookie %r", matching)
                self.remove_cookie(matching)

        if cookie.value is None:
            jar_logger.debug("Not storing deleted cookie %r", cookie.name)
            return

        self._cookies[cookie.key] = cookie

    @staticmethod
    def _is_less_restrictive(cookie: Cookie, other: Cookie) -> bool:
        """Whether ``cookie`` has a strictly larger Max-Age than ``other``.

        A missing Max-Age on ``other`` ranks lowest.
        """
        if cookie.max_age is None:
            return False
        return other.max_age is None or cookie.max_age > other.max_age

    @staticmethod
    def _is_domain_match(domain: str, hostname: str) -> bool:
        """Implements domain matching adhering to RFC 6265."""
        if hostname == domain:
            return True

        if not hostname.endswith(domain):
            return False

        non_matching = hostname[: -len(domain)]

        return non_matching.endswith(".")
