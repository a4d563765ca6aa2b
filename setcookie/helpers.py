"""Various helper functions"""

import datetime
import re
import time
from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple
from urllib.parse import quote

from .exceptions import InvalidMaxAge, InvalidName, InvalidValue, UnparseableDate
from .log import internal_logger

if TYPE_CHECKING:
    from .cookie import Cookie

__all__ = (
    "DATE_FORMATS",
    "MAX_EXPIRES",
    "format_date",
    "normalize_domain",
    "normalize_path",
    "parse_date",
    "to_string",
    "validate_max_age",
    "validate_name",
    "validate_value",
)

# Seconds subtracted from "now" when emitting the expiry of a deleted cookie.
EXPIRED_DELTA = 31536001
# Epoch seconds of 9999-12-31T23:59:59Z, the last second a four digit
# Expires year can express.
MAX_EXPIRES = 253402300799
# Placeholder value written for a deleted cookie.
DELETED_VALUE = "deleted"

_NAME_SEPARATORS_RE = re.compile(r"[=,; \t\r\n\x0b\x0c]")
# Name attribute is a token as per RFC 2616 section 2.2
_NAME_NON_TOKEN_RE = re.compile(
    r"[\x00-\x20\x22\x28-\x29\x2C\x2F\x3A-\x40\x5B-\x5D\x7B\x7D\x7F]"
)
# Bare LF, bare CR, or CRLF not followed by a space or horizontal tab
_VALUE_CRLF_RE = re.compile(r"(?:(?<!\r)\n)|(?:\r(?!\n))|(?:\r\n(?![ \t]))")
# RFC 6265 section 4.1.1 cookie-octet
_VALUE_NON_OCTET_RE = re.compile(r"[^\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]")

_WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = (
    "",  # Dummy so we can use 1-based month numbers
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def validate_name(name: str) -> None:
    """Validates the name attribute.

    Raises InvalidName if the name is empty or contains characters which
    are not allowed in an RFC 2616 token.
    """
    if not isinstance(name, str):
        raise InvalidName(name, "The cookie name must be a string.")

    if not name:
        raise InvalidName(name, "The name cannot be empty")

    if _NAME_SEPARATORS_RE.search(name):
        raise InvalidName(
            name,
            "Cookie name cannot contain these characters: "
            "=,; \\t\\r\\n\\013\\014 ({!r})".format(name),
        )

    if _NAME_NON_TOKEN_RE.search(name):
        raise InvalidName(
            name, "The cookie name {!r} contains invalid characters.".format(name)
        )


def validate_value(value: Optional[str]) -> None:
    """Validates a value.

    Per RFC 7230, header continuations must consist of a single CRLF
    followed by a space or horizontal tab; anything else is treated as a
    header injection attempt. On top of that only RFC 6265 cookie-octets
    are accepted. None is a valid value (deleted cookie).
    """
    if value is None:
        return

    if not isinstance(value, str):
        raise InvalidValue(value, "The cookie value must be a string or None.")

    if _VALUE_CRLF_RE.search(value) or _VALUE_NON_OCTET_RE.search(value):
        raise InvalidValue(
            value, "The cookie value {!r} contains invalid characters.".format(value)
        )


def validate_max_age(max_age: Optional[int]) -> None:
    if max_age is None:
        return
    # bool is an int subclass but never a meaningful Max-Age
    if not isinstance(max_age, int) or isinstance(max_age, bool):
        raise InvalidMaxAge(max_age)


def normalize_domain(domain: Optional[str]) -> Optional[str]:
    """Remove the leading '.' and lowercase the domain.

    See RFC 6265 sections 4.1.2.3, 5.1.3 and 5.2.3.
    """
    if domain is None:
        return None
    return domain.lower().lstrip(".")


def normalize_path(path: Optional[str]) -> str:
    """Processes path as per RFC 6265 sections 5.1.4 and 5.2.4."""
    path = (path or "").rstrip("/")
    if not path or not path.startswith("/"):
        return "/"
    return path


class DateFormat(NamedTuple):
    """One accepted cookie date encoding.

    ``pattern`` is a strptime() pattern for everything but the trailing
    timezone token; ``has_timezone`` says whether such a token follows.
    """

    pattern: str
    has_timezone: bool


# Handles dates as defined by RFC 2616 section 3.3.1, and also some other
# non-standard, but common formats. Tried in order.
DATE_FORMATS: Tuple[DateFormat, ...] = (
    DateFormat("%a, %d %b %y %H:%M:%S", True),
    DateFormat("%a, %d %b %Y %H:%M:%S", True),
    DateFormat("%a, %d-%b-%y %H:%M:%S", True),
    DateFormat("%a, %d-%b-%Y %H:%M:%S", True),
    DateFormat("%a, %d-%m-%y %H:%M:%S", True),
    DateFormat("%a, %d-%m-%Y %H:%M:%S", True),
    DateFormat("%a %b %d %H:%M:%S %Y", False),
    DateFormat("%a %b %d %H:%M:%S %Y", True),
)

# RFC 822 section 5.1 zones, in hours east of GMT
_TIMEZONES = {
    "GMT": 0,
    "UTC": 0,
    "UT": 0,
    "Z": 0,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
}
_NUMERIC_TZ_RE = re.compile(r"([+-])(\d{2}):?(\d{2})")


def _parse_timezone(token: str) -> Optional[datetime.timezone]:
    hours = _TIMEZONES.get(token.upper())
    if hours is not None:
        return datetime.timezone(datetime.timedelta(hours=hours))

    match = _NUMERIC_TZ_RE.fullmatch(token)
    if match is None:
        return None
    sign, hh, mm = match.groups()
    offset = datetime.timedelta(hours=int(hh), minutes=int(mm))
    if offset >= datetime.timedelta(days=1):
        return None
    return datetime.timezone(-offset if sign == "-" else offset)


def _parse_with_format(
    date_str: str, date_format: DateFormat
) -> Optional[datetime.datetime]:
    tzinfo = datetime.timezone.utc
    if date_format.has_timezone:
        date_str, sep, tz_token = date_str.rpartition(" ")
        if not sep:
            return None
        parsed_tz = _parse_timezone(tz_token)
        if parsed_tz is None:
            return None
        tzinfo = parsed_tz

    try:
        dt = datetime.datetime.strptime(date_str.strip(), date_format.pattern)
    except ValueError:
        return None

    return dt.replace(tzinfo=tzinfo).astimezone(datetime.timezone.utc)


_DATE_TOKENS_RE = re.compile(
    r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*"
    r"(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)"
)
_DATE_HMS_TIME_RE = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})")
_DATE_DAY_OF_MONTH_RE = re.compile(r"(\d{1,2})")
_DATE_MONTH_RE = re.compile(
    "(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)",
    re.I,
)
_DATE_YEAR_RE = re.compile(r"(\d{2,4})")


def _parse_rfc6265_date(date_str: str) -> Optional[datetime.datetime]:
    """Implements date string parsing adhering to RFC 6265 section 5.1.1."""
    found_time = False
    found_day_of_month = False
    found_month = False
    found_year = False

    hour = minute = second = 0
    day_of_month = 0
    month = 0
    year = 0

    for token_match in _DATE_TOKENS_RE.finditer(date_str):
        token = token_match.group("token")

        if not found_time:
            time_match = _DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = (int(s) for s in time_match.groups())
                continue

        if not found_day_of_month:
            day_of_month_match = _DATE_DAY_OF_MONTH_RE.match(token)
            if day_of_month_match:
                found_day_of_month = True
                day_of_month = int(day_of_month_match.group())
                continue

        if not found_month:
            month_match = _DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                month = _MONTH_NAMES.index(month_match.group().capitalize())
                continue

        if not found_year:
            year_match = _DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group())

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if False in (found_day_of_month, found_month, found_year, found_time):
        return None

    if not 1 <= day_of_month <= 31:
        return None

    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    try:
        return datetime.datetime(
            year,
            month,
            day_of_month,
            hour,
            minute,
            second,
            tzinfo=datetime.timezone.utc,
        )
    except ValueError:  # e.g. 31 Feb
        return None


def _parse_iso_date(date_str: str) -> Optional[datetime.datetime]:
    try:
        dt = datetime.datetime.fromisoformat(date_str)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def parse_date(date_str: str) -> datetime.datetime:
    """Parse a cookie date string into an aware UTC datetime.

    Every pattern from DATE_FORMATS is tried in order. When none of them
    match, the RFC 6265 token algorithm and then ISO 8601 are attempted,
    assuming GMT when no zone is given.

    Raises UnparseableDate if nothing understands the input.
    """
    if not isinstance(date_str, str) or not date_str.strip():
        raise UnparseableDate(
            date_str, "Unparseable cookie date string {!r}".format(date_str)
        )

    date_str = date_str.strip()
    for date_format in DATE_FORMATS:
        dt = _parse_with_format(date_str, date_format)
        if dt is not None:
            return dt

    # attempt a fallback for unusual formatting
    internal_logger.debug("Falling back to free-form parsing for %r", date_str)
    dt = _parse_rfc6265_date(date_str)
    if dt is None:
        dt = _parse_iso_date(date_str)
    if dt is not None:
        return dt

    raise UnparseableDate(
        date_str, "Unparseable cookie date string {!r}".format(date_str)
    )


def format_date(timestamp: int) -> str:
    """Format epoch seconds as ``Wkd, DD-Mon-YYYY HH:MM:SS GMT``.

    Weekday and month names are always English.
    """
    year, month, day, hh, mm, ss, wd, _, _ = time.gmtime(timestamp)
    return "%s, %02d-%3s-%04d %02d:%02d:%02d GMT" % (
        _WEEKDAY_NAMES[wd],
        day,
        _MONTH_NAMES[month],
        year,
        hh,
        mm,
        ss,
    )


def to_string(cookie: "Cookie") -> str:
    """Convert a cookie to its Set-Cookie header value.

    A cookie without a value is emitted as an already expired "deleted"
    cookie so that clients drop it immediately.
    """
    value = cookie.value if cookie.value is not None else DELETED_VALUE
    header = [quote(cookie.name, safe="") + "=" + quote(value, safe="")]

    if cookie.expires is not None and cookie.expires > 0:
        max_age = cookie.max_age
        if max_age is None:
            max_age = max(0, cookie.expires - int(time.time()))
        header.append("Expires=" + format_date(cookie.expires))
        header.append("Max-Age=%d" % max_age)
    elif cookie.value is None:
        header.append("Expires=" + format_date(int(time.time()) - EXPIRED_DELTA))
        header.append("Max-Age=0")
    elif cookie.max_age is not None:
        header.append("Max-Age=%d" % cookie.max_age)

    if cookie.path:
        header.append("Path=" + cookie.path)

    if cookie.domain:
        header.append("Domain=" + cookie.domain)

    if cookie.secure:
        header.append("Secure")

    if cookie.http_only:
        header.append("HttpOnly")

    if cookie.same_site is not None:
        header.append("SameSite=" + cookie.same_site.value)

    return "; ".join(header)
