"""Subdomain validation tests."""
import pytest

from hms.core.subdomain import (
    check_subdomain_format,
    is_reserved_subdomain,
    sanitize_subdomain,
)


@pytest.mark.parametrize("subdomain", ["general", "st-marys", "clinic42", "abc"])
def test_valid_subdomains(subdomain):
    check = check_subdomain_format(subdomain)
    assert check.is_valid
    assert check.code is None


@pytest.mark.parametrize(
    "subdomain, code",
    [
        ("", "EMPTY"),
        (None, "EMPTY"),
        ("ab", "TOO_SHORT"),
        ("a" * 64, "TOO_LONG"),
        ("General", "UPPERCASE"),
        ("-general", "INVALID_HYPHEN"),
        ("general-", "INVALID_HYPHEN"),
        ("gen_eral", "INVALID_FORMAT"),
        ("gen.eral", "INVALID_FORMAT"),
        ("www", "RESERVED"),
        ("admin", "RESERVED"),
    ],
)
def test_invalid_subdomains(subdomain, code):
    check = check_subdomain_format(subdomain)
    assert not check.is_valid
    assert check.code == code
    assert check.message


def test_reserved_check_ignores_case():
    assert is_reserved_subdomain("API")
    assert not is_reserved_subdomain("general")


def test_sanitize_subdomain():
    assert sanitize_subdomain("  St. Mary's Hospital! ") == "stmaryshospital"
    assert sanitize_subdomain("--north-wing--") == "north-wing"
    assert sanitize_subdomain("Clinic_42") == "clinic42"
