__version__ = "1.0.0"

from typing import Tuple

from . import hdrs
from .abc import AbstractCookieJar
from .cookie import Cookie, SameSite, parse_set_cookie_header
from .cookiejar import CookieJar
from .exceptions import (
    CookieError,
    InvalidMaxAge,
    InvalidName,
    InvalidSameSite,
    InvalidValue,
    UnparseableDate,
    UnresolvableCookie,
)
from .helpers import (
    format_date,
    normalize_domain,
    normalize_path,
    parse_date,
    to_string,
    validate_max_age,
    validate_name,
    validate_value,
)

__all__: Tuple[str, ...] = (
    "hdrs",
    # abc
    "AbstractCookieJar",
    # cookie
    "Cookie",
    "SameSite",
    "parse_set_cookie_header",
    # cookiejar
    "CookieJar",
    # exceptions
    "CookieError",
    "InvalidMaxAge",
    "InvalidName",
    "InvalidSameSite",
    "InvalidValue",
    "UnparseableDate",
    "UnresolvableCookie",
    # helpers
    "format_date",
    "normalize_domain",
    "normalize_path",
    "parse_date",
    "to_string",
    "validate_max_age",
    "validate_name",
    "validate_value",
)
