"""
Subdomain validation for tenant-facing hostnames.
"""

import re
from dataclasses import dataclass

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]{1,61}[a-z0-9])?$")

MIN_LENGTH = 3
MAX_LENGTH = 63

RESERVED_SUBDOMAINS = frozenset({
    "www", "api", "admin", "app", "mail", "ftp", "smtp", "pop", "imap",
    "webmail", "ns", "dns", "status", "monitor", "dashboard", "portal",
    "help", "support", "billing", "account", "login", "signup", "signin",
    "register", "auth",
})


@dataclass(frozen=True)
class SubdomainCheck:
    """Outcome of a format check."""

    is_valid: bool
    code: str | None = None
    message: str | None = None


def sanitize_subdomain(raw: str) -> str:
    """
    Normalize user input into subdomain form.

    Lowercases, trims, drops characters outside ``[a-z0-9-]`` and strips
    leading and trailing hyphens.
    """
    value = re.sub(r"[^a-z0-9-]", "", raw.lower().strip())
    return value.strip("-")


def is_reserved_subdomain(subdomain: str) -> bool:
    return subdomain.lower() in RESERVED_SUBDOMAINS


def check_subdomain_format(subdomain: str | None) -> SubdomainCheck:
    """
    Check a subdomain against the format rules.

    Rules, in order: non-empty, 3-63 characters, lowercase alphanumerics and
    inner hyphens only, not reserved.
    """
    if not subdomain or not subdomain.strip():
        return SubdomainCheck(False, "EMPTY", "Subdomain is required")

    value = subdomain.strip()

    if len(value) < MIN_LENGTH:
        return SubdomainCheck(
            False, "TOO_SHORT", f"Subdomain must be at least {MIN_LENGTH} characters"
        )

    if len(value) > MAX_LENGTH:
        return SubdomainCheck(
            False, "TOO_LONG", f"Subdomain must be at most {MAX_LENGTH} characters"
        )

    if value != value.lower():
        return SubdomainCheck(False, "UPPERCASE", "Subdomain must be lowercase")

    if not SUBDOMAIN_PATTERN.match(value):
        if value.startswith("-") or value.endswith("-"):
            return SubdomainCheck(
                False, "INVALID_HYPHEN", "Subdomain cannot start or end with a hyphen"
            )
        return SubdomainCheck(
            False,
            "INVALID_FORMAT",
            "Subdomain may only contain lowercase letters, numbers and hyphens",
        )

    if is_reserved_subdomain(value):
        return SubdomainCheck(False, "RESERVED", f"Subdomain '{value}' is reserved")

    return SubdomainCheck(True)
