import datetime
import enum
import math
import time
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import unquote

import attr

from . import helpers
from .exceptions import InvalidMaxAge, InvalidName, InvalidSameSite, UnparseableDate
from .typedefs import LooseExpires

__all__ = ("Cookie", "SameSite", "parse_set_cookie_header")


class SameSite(str, enum.Enum):
    STRICT = "Strict"
    LAX = "Lax"
    NONE = "None"


def _convert_domain(domain: Optional[str]) -> Optional[str]:
    return helpers.normalize_domain(domain) or None


def _convert_expires(expires: LooseExpires) -> Optional[int]:
    if expires is None:
        return None
    if isinstance(expires, datetime.datetime):
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=datetime.timezone.utc)
        timestamp = int(expires.timestamp())
    elif isinstance(expires, str):
        timestamp = int(helpers.parse_date(expires).timestamp())
    elif isinstance(expires, bool) or not isinstance(expires, (int, float)):
        raise UnparseableDate(
            expires, "Unsupported cookie expiry {!r}".format(expires)
        )
    elif isinstance(expires, float) and not math.isfinite(expires):
        raise UnparseableDate(
            expires, "Cookie expiry must be finite, got {!r}".format(expires)
        )
    else:
        timestamp = int(expires)

    if timestamp > helpers.MAX_EXPIRES:
        raise UnparseableDate(
            expires, "Cookie expiry {!r} is after year 9999".format(expires)
        )
    return timestamp


def _convert_same_site(same_site: Any) -> Optional[SameSite]:
    if same_site is None or isinstance(same_site, SameSite):
        return same_site
    if isinstance(same_site, str):
        for member in SameSite:
            if member.value.lower() == same_site.lower():
                return member
    raise InvalidSameSite(same_site)


def _optional_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def _validate_name(
    inst: "Cookie", attribute: "attr.Attribute[str]", value: str
) -> None:
    helpers.validate_name(value)


def _validate_value(
    inst: "Cookie", attribute: "attr.Attribute[Optional[str]]", value: Optional[str]
) -> None:
    helpers.validate_value(value)


def _validate_max_age(
    inst: "Cookie", attribute: "attr.Attribute[Optional[int]]", value: Optional[int]
) -> None:
    helpers.validate_max_age(value)


@attr.s(frozen=True, slots=True)
class Cookie:
    """A single outbound cookie.

    Instances are validated on construction and never change afterwards;
    ``with_domain()`` and ``with_secure()`` return derived copies.

    ``value`` set to None marks the cookie as deleted. ``secure`` set to
    None means the attribute was not given, which lets a jar fill in its
    own default.
    """

    name = attr.ib(type=str, validator=_validate_name)
    value = attr.ib(type=Optional[str], validator=_validate_value)
    domain = attr.ib(type=Optional[str], default=None, converter=_convert_domain)
    path = attr.ib(type=str, default=None, converter=helpers.normalize_path)
    max_age = attr.ib(type=Optional[int], default=None, validator=_validate_max_age)
    expires = attr.ib(type=Optional[int], default=None, converter=_convert_expires)
    secure = attr.ib(type=Optional[bool], default=None, converter=_optional_bool)
    discard = attr.ib(type=bool, default=False, converter=bool)
    http_only = attr.ib(type=bool, default=False, converter=bool)
    same_site = attr.ib(
        type=Optional[SameSite], default=None, converter=_convert_same_site
    )

    @classmethod
    def from_fields(
        cls,
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
    ) -> "Cookie":
        """Create a cookie from raw attribute values."""
        return cls(
            name,
            value,
            domain=domain,
            path=path,
            max_age=max_age,
            expires=expires,
            secure=secure,
            discard=discard,
            http_only=http_only,
            same_site=same_site,
        )

    @classmethod
    def from_existing(cls, cookie: "Cookie") -> "Cookie":
        return attr.evolve(cookie)

    @property
    def key(self) -> Tuple[str, Optional[str], str]:
        """Identity of the cookie: lowercased name, domain and path."""
        return (self.name.lower(), self.domain, self.path)

    @property
    def is_secure(self) -> bool:
        return bool(self.secure)

    def matches(self, other: "Cookie") -> bool:
        return self.key == other.key

    def with_domain(self, domain: Optional[str]) -> "Cookie":
        return attr.evolve(self, domain=domain)

    def with_secure(self, secure: bool) -> "Cookie":
        return attr.evolve(self, secure=secure)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.max_age is not None and self.max_age <= 0:
            return True
        if self.expires is None:
            return False
        if now is None:
            now = time.time()
        return self.expires <= now

    def output(self) -> str:
        """Return the Set-Cookie header value."""
        return helpers.to_string(self)

    def __str__(self) -> str:
        return self.output()


def parse_set_cookie_header(header: str) -> Cookie:
    """Build a Cookie from a single Set-Cookie header value.

    Name and value are percent-decoded. Attribute names are case
    insensitive, unknown attributes are ignored.

    The ``deleted`` placeholder written for a deleted cookie is read back
    as a None value when the header also expires the cookie, either with
    ``Max-Age`` of zero or less or with an ``Expires`` date in the past.
    """
    pair, *attrs = header.split(";")
    name, sep, value = pair.partition("=")
    if not sep:
        raise InvalidName(
            pair, "Cookie pair {!r} has no '=' separator".format(pair.strip())
        )

    fields: Dict[str, Any] = {}
    for item in attrs:
        key, sep, attr_value = item.partition("=")
        key = key.strip().lower()
        attr_value = attr_value.strip()
        if key == "expires":
            fields["expires"] = attr_value
        elif key == "max-age":
            try:
                fields["max_age"] = int(attr_value)
            except ValueError:
                raise InvalidMaxAge(attr_value) from None
        elif key == "path":
            fields["path"] = attr_value
        elif key == "domain":
            fields["domain"] = attr_value
        elif key == "samesite":
            fields["same_site"] = attr_value
        elif key == "secure":
            fields["secure"] = True
        elif key == "httponly":
            fields["http_only"] = True
        elif key == "discard":
            fields["discard"] = True

    cookie = Cookie.from_fields(
        unquote(name.strip()), unquote(value.strip()), **fields
    )
    if cookie.value == helpers.DELETED_VALUE and cookie.is_expired():
        return attr.evolve(cookie, value=None)
    return cookie
