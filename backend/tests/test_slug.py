"""Slug derivation used when a person is created without an explicit slug."""

import pytest

from quoteable.lib.slug import slugify


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Albert Einstein", "albert-einstein"),
        ("John.Doe+test@example.com", "john-doe-test"),
        ("  Maya Angelou  ", "maya-angelou"),
        ("Martin Luther King Jr.", "martin-luther-king-jr"),
        ("Zoë", "zo"),
        ("--Seneca--", "seneca"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_consecutive_separators_are_not_collapsed():
    assert slugify("a  b") == "a--b"


@pytest.mark.parametrize("value", ["", "@example.com", "!!!", None])
def test_fallback_when_nothing_usable(value):
    assert slugify(value, fallback="person") == "person"


def test_default_fallback():
    assert slugify("") == "user"
