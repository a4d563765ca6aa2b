import pickle

import pytest

from setcookie import exceptions


@pytest.mark.parametrize(
    "exc_class",
    [
        exceptions.InvalidName,
        exceptions.InvalidValue,
        exceptions.InvalidMaxAge,
        exceptions.InvalidSameSite,
        exceptions.UnparseableDate,
        exceptions.UnresolvableCookie,
    ],
)
def test_hierarchy(exc_class: type) -> None:
    assert issubclass(exc_class, exceptions.CookieError)
    assert issubclass(exc_class, ValueError)


def test_unresolvable_is_type_error() -> None:
    assert issubclass(exceptions.UnresolvableCookie, TypeError)


def test_default_message() -> None:
    err = exceptions.InvalidMaxAge("60")
    assert err.value == "60"
    assert err.message == "Max-Age must be integer"
    assert str(err) == "Max-Age must be integer"


def test_custom_message() -> None:
    err = exceptions.InvalidName("a=b", "bad name")
    assert err.value == "a=b"
    assert str(err) == "bad name"
    assert repr(err) == "<InvalidName: bad name>"


def test_class_message_untouched() -> None:
    exceptions.InvalidValue("x", "custom")
    assert exceptions.InvalidValue.message == "Invalid cookie value"


def test_pickle() -> None:
    err = exceptions.UnparseableDate("garbage")
    for proto in range(pickle.HIGHEST_PROTOCOL + 1):
        pickled = pickle.dumps(err, proto)
        err2 = pickle.loads(pickled)
        assert isinstance(err2, exceptions.UnparseableDate)
        assert err2.value == "garbage"
        assert err2.message == "Unparseable cookie date string"
