import datetime

import attr
import pytest
from freezegun import freeze_time

from setcookie import Cookie, SameSite, helpers, parse_set_cookie_header
from setcookie.exceptions import (
    InvalidMaxAge,
    InvalidName,
    InvalidSameSite,
    InvalidValue,
    UnparseableDate,
)


def test_defaults() -> None:
    cookie = Cookie("id", "abc")
    assert cookie.name == "id"
    assert cookie.value == "abc"
    assert cookie.domain is None
    assert cookie.path == "/"
    assert cookie.max_age is None
    assert cookie.expires is None
    assert cookie.secure is None
    assert not cookie.is_secure
    assert not cookie.discard
    assert not cookie.http_only
    assert cookie.same_site is None


def test_domain_is_normalized() -> None:
    cookie = Cookie(name="x", value="v", domain=".EXAMPLE.com")
    assert cookie.domain == "example.com"


def test_empty_domain_is_unset() -> None:
    assert Cookie("x", "v", domain="").domain is None
    assert Cookie("x", "v", domain=".").domain is None


@pytest.mark.parametrize(
    ("path", "expected"), [(None, "/"), ("", "/"), ("/a/", "/a"), ("rel", "/")]
)
def test_path_is_normalized(path: str, expected: str) -> None:
    assert Cookie("x", "v", path=path).path == expected


def test_invalid_name() -> None:
    with pytest.raises(InvalidName):
        Cookie("a=b", "v")


def test_invalid_value() -> None:
    with pytest.raises(InvalidValue):
        Cookie("id", "bad\r\nSet-Cookie: evil=1")


def test_invalid_max_age() -> None:
    with pytest.raises(InvalidMaxAge):
        Cookie("id", "v", max_age="60")  # type: ignore[arg-type]


def test_tombstone_is_valid() -> None:
    assert Cookie("id", None).value is None


def test_expires_from_datetime() -> None:
    dt = datetime.datetime(1994, 11, 6, 8, 49, 37, tzinfo=datetime.timezone.utc)
    assert Cookie("id", "v", expires=dt).expires == 784111777


def test_expires_from_naive_datetime_is_gmt() -> None:
    dt = datetime.datetime(1994, 11, 6, 8, 49, 37)
    assert Cookie("id", "v", expires=dt).expires == 784111777


def test_expires_from_string() -> None:
    cookie = Cookie("id", "v", expires="Sun, 06 Nov 1994 08:49:37 GMT")
    assert cookie.expires == 784111777


def test_expires_from_float() -> None:
    assert Cookie("id", "v", expires=784111777.9).expires == 784111777


def test_expires_unparseable() -> None:
    with pytest.raises(UnparseableDate):
        Cookie("id", "v", expires="next tuesday")


def test_expires_unsupported_type() -> None:
    with pytest.raises(UnparseableDate):
        Cookie("id", "v", expires=[1, 2])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "expires",
    [10**20, helpers.MAX_EXPIRES + 1, float("inf"), float("-inf"), float("nan")],
)
def test_expires_out_of_range(expires: float) -> None:
    with pytest.raises(UnparseableDate) as ctx:
        Cookie("id", "v", expires=expires)
    assert ctx.value.value is expires


def test_expires_after_year_9999_with_offset() -> None:
    eastern = datetime.timezone(-datetime.timedelta(hours=5))
    with pytest.raises(UnparseableDate):
        Cookie(
            "id", "v", expires=datetime.datetime(9999, 12, 31, 23, 0, tzinfo=eastern)
        )


@freeze_time("2024-01-01 00:00:00")
def test_expires_at_upper_bound() -> None:
    cookie = Cookie("id", "v", expires=helpers.MAX_EXPIRES)
    assert cookie.expires == helpers.MAX_EXPIRES
    assert "Expires=Fri, 31-Dec-9999 23:59:59 GMT" in cookie.output()
    assert parse_set_cookie_header(cookie.output()).expires == helpers.MAX_EXPIRES


@pytest.mark.parametrize(
    ("same_site", "expected"),
    [
        ("Strict", SameSite.STRICT),
        ("lax", SameSite.LAX),
        ("NONE", SameSite.NONE),
        (SameSite.LAX, SameSite.LAX),
        (None, None),
    ],
)
def test_same_site(same_site: str, expected: SameSite) -> None:
    assert Cookie("id", "v", same_site=same_site).same_site is expected


def test_same_site_invalid() -> None:
    with pytest.raises(InvalidSameSite):
        Cookie("id", "v", same_site="sometimes")


def test_frozen() -> None:
    cookie = Cookie("id", "v")
    with pytest.raises(attr.exceptions.FrozenInstanceError):
        cookie.value = "other"  # type: ignore[misc]


def test_from_fields() -> None:
    cookie = Cookie.from_fields(
        "id",
        "v",
        "Example.com",
        "/app",
        60,
        None,
        True,
        False,
        True,
        "Strict",
    )
    assert cookie == Cookie(
        "id",
        "v",
        domain="example.com",
        path="/app",
        max_age=60,
        secure=True,
        http_only=True,
        same_site=SameSite.STRICT,
    )


def test_from_existing() -> None:
    cookie = Cookie("id", "v", domain="example.com")
    copy = Cookie.from_existing(cookie)
    assert copy == cookie
    assert copy is not cookie


def test_key_and_matches() -> None:
    a = Cookie("Session", "1", domain="example.com", path="/")
    b = Cookie("session", "2", domain=".EXAMPLE.com", path="")
    c = Cookie("session", "1", domain="example.com", path="/app")
    assert a.key == ("session", "example.com", "/")
    assert a.matches(b)
    assert not a.matches(c)


def test_with_domain_returns_copy() -> None:
    cookie = Cookie("id", "v")
    derived = cookie.with_domain(".Example.com")
    assert cookie.domain is None
    assert derived.domain == "example.com"
    assert derived.value == "v"


def test_with_secure_returns_copy() -> None:
    cookie = Cookie("id", "v")
    derived = cookie.with_secure(True)
    assert cookie.secure is None
    assert derived.secure is True
    assert derived.is_secure


def test_is_expired() -> None:
    assert not Cookie("id", "v").is_expired()
    assert Cookie("id", "v", max_age=0).is_expired()
    assert Cookie("id", "v", expires=100).is_expired(now=200)
    assert not Cookie("id", "v", expires=300).is_expired(now=200)


@freeze_time("1994-11-06 08:00:00")
def test_is_expired_uses_current_time() -> None:
    assert not Cookie("id", "v", expires=784111777).is_expired()
    with freeze_time("1994-11-07"):
        assert Cookie("id", "v", expires=784111777).is_expired()


def test_str_is_header_value() -> None:
    cookie = Cookie("id", "abc", http_only=True)
    assert str(cookie) == cookie.output() == "id=abc; Path=/; HttpOnly"


# ----------------------------------- parse_set_cookie_header ---------------


def test_parse_set_cookie_header() -> None:
    cookie = parse_set_cookie_header(
        "id=abc; Expires=Sun, 06-Nov-1994 08:49:37 GMT; Max-Age=3600; "
        "Path=/app; Domain=example.com; Secure; HttpOnly; SameSite=Lax"
    )
    assert cookie == Cookie(
        "id",
        "abc",
        domain="example.com",
        path="/app",
        max_age=3600,
        expires=784111777,
        secure=True,
        http_only=True,
        same_site="Lax",
    )


def test_parse_set_cookie_header_is_case_insensitive() -> None:
    cookie = parse_set_cookie_header("id=abc; path=/x; SECURE; httponly; discard")
    assert cookie.path == "/x"
    assert cookie.secure
    assert cookie.http_only
    assert cookie.discard


def test_parse_set_cookie_header_ignores_unknown_attributes() -> None:
    cookie = parse_set_cookie_header("id=abc; Priority=High; Partitioned")
    assert cookie == Cookie("id", "abc")


def test_parse_set_cookie_header_decodes_value() -> None:
    cookie = Cookie("token", "a/b:c", max_age=60)
    parsed = parse_set_cookie_header(cookie.output())
    assert parsed == cookie


def test_parse_set_cookie_header_without_separator() -> None:
    with pytest.raises(InvalidName):
        parse_set_cookie_header("justaname; Path=/")


def test_parse_set_cookie_header_invalid_max_age() -> None:
    with pytest.raises(InvalidMaxAge):
        parse_set_cookie_header("id=abc; Max-Age=soon")


def test_parse_set_cookie_header_rejects_injection() -> None:
    with pytest.raises(InvalidValue):
        parse_set_cookie_header("id=a%0D%0Ab")


@freeze_time("2024-01-01 00:00:00")
def test_parse_set_cookie_header_deleted_cookie() -> None:
    cookie = Cookie("id", None, path="/app")
    parsed = parse_set_cookie_header(cookie.output())
    assert parsed.value is None
    assert parsed.key == cookie.key


def test_parse_set_cookie_header_deleted_by_past_expiry() -> None:
    parsed = parse_set_cookie_header(
        "id=deleted; Expires=Sun, 06-Nov-1994 08:49:37 GMT; Path=/"
    )
    assert parsed.value is None


def test_parse_set_cookie_header_live_deleted_value() -> None:
    parsed = parse_set_cookie_header("id=deleted; Max-Age=60")
    assert parsed.value == "deleted"
