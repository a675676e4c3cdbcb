"""
Unit tests for email normalization and format validation.
"""

import pytest

from flowmanager.app.core.email import normalize_email, is_email_format_valid, MAX_EMAIL_LENGTH


@pytest.mark.parametrize("raw, expected", [
    ("  Jan.Kowalski@Test.PL ", "jan.kowalski@test.pl"),
    ("ANNA@FIRMA.COM", "anna@firma.com"),
    ("", ""),
    (None, ""),
])
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


def test_normalize_email_is_idempotent():
    once = normalize_email("\tMaria.Wojcik@Example.Org\n")
    assert normalize_email(once) == once


@pytest.mark.parametrize("email", [
    "jan.kowalski@test.pl",
    "first+tag@sub.example.com",
    "a_b-c%d@firma.co",
])
def test_valid_emails(email):
    assert is_email_format_valid(email)


@pytest.mark.parametrize("email", [
    "",
    "plainaddress",
    "no-at-sign.pl",
    "jan@nodot",
    "jan@domain.c",
    "jan..kowalski@test.pl",
    ".jan@test.pl",
    "jan@test.pl.",
    "jan kowalski@test.pl",
    "jan@-firma.pl",
    "jan@firma-.pl",
    "jan@firma.pl@test.pl",
    "x" * MAX_EMAIL_LENGTH + "@test.pl",
])
def test_invalid_emails(email):
    assert not is_email_format_valid(email)
