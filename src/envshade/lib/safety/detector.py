"""Heuristic classification of `.env` assignments as secrets."""

from __future__ import annotations

import base64
import binascii
import re

# Operational keys that are never masked, whatever their value looks like.
_COMMON_NON_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "PORT",
        "HOST",
        "NODE_ENV",
        "APP_NAME",
        "DEBUG",
        "LOG_LEVEL",
        "ENV",
        "ENVIRONMENT",
        "VERSION",
        "LANG",
        "TIMEZONE",
        "REGION",
        "ENDPOINT",
        "URL",
        "URI",
        "DOMAIN",
        "SERVER",
        "CLUSTER",
    }
)

_SECRET_KEY_MARKERS: tuple[str, ...] = (
    "SECRET",
    "TOKEN",
    "PASSWORD",
    "PASS",
    "AUTH",
    "CREDENTIAL",
    "PRIVATE",
    "API_KEY",
    "ACCESS_KEY",
)

# Lowercase; matched against the lowercased value.
_KNOWN_SECRET_PREFIXES: tuple[str, ...] = (
    "sk_live_",
    "sk_test_",
    "rk_live_",
    "rk_test_",
    "ghp_",
    "gho_",
    "ghu_",
    "ghs_",
    "github_pat_",
    "pk_live_",
    "pk_test_",
    "xoxb-",
    "xoxp-",
    "xoxa-",
    "ya29.",
    "whsec_",
    "akiai",
    "akia",
    "age-secret-key-",
)

JWT_PREFIX = "eyJ"
JWT_MIN_LENGTH = 50
BASE64_MIN_LENGTH = 20
HEX_MIN_LENGTH = 32

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_BASE64_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")
_BASE64_IGNORED = str.maketrans("", "", "\n \t\r")


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def is_common_non_secret(key: str) -> bool:
    return key.upper() in _COMMON_NON_SECRET_KEYS


def is_secret_key(key: str) -> bool:
    return _contains_any(key.upper(), _SECRET_KEY_MARKERS)


def is_credentialed_url(value: str) -> bool:
    return "://" in value and "@" in value


def is_jwt(value: str) -> bool:
    return value.startswith(JWT_PREFIX) and len(value) > JWT_MIN_LENGTH


def has_known_secret_prefix(value: str) -> bool:
    return value.lower().startswith(_KNOWN_SECRET_PREFIXES)


def is_base64(text: str) -> bool:
    """True when `text`, ignoring whitespace, is padded standard base64."""

    compact = text.translate(_BASE64_IGNORED)
    if not compact or len(compact) % 4 != 0:
        return False
    if _BASE64_RE.fullmatch(compact) is None:
        return False
    try:
        base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def is_hex(text: str) -> bool:
    return _HEX_RE.fullmatch(text) is not None


def is_secret_value(value: str) -> bool:
    """Classify a value by its shape alone."""

    if not value:
        return False
    if is_credentialed_url(value):
        return True
    if is_jwt(value):
        return True
    if has_known_secret_prefix(value):
        return True
    # JWTs are excluded here so independent callers do not double count them.
    if len(value) > BASE64_MIN_LENGTH and is_base64(value) and not value.startswith(JWT_PREFIX):
        return True
    return len(value) > HEX_MIN_LENGTH and is_hex(value)


def is_secret(key: str, value: str) -> bool:
    """Decide whether one assignment should be masked.

    The allowlist wins over everything, an empty value is never a secret, and
    a secret-sounding key wins over the value-shape heuristics.
    """

    if is_common_non_secret(key):
        return False
    if not value:
        return False
    if is_secret_key(key):
        return True
    return is_secret_value(value)
