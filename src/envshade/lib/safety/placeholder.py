"""Format-preserving placeholders for detected secrets."""

from __future__ import annotations

from envshade.lib.safety.detector import is_credentialed_url, is_jwt

MASK = "***"
JWT_PLACEHOLDER = "eyJ***"
URL_PLACEHOLDER = "***://***"

# (lowercase prefixes, placeholder), checked in order after JWT and URL shapes.
_PREFIX_PLACEHOLDERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("sk_live_", "sk_test_"), "sk_***"),
    (("ghp_", "gho_", "ghu_"), "ghp_***"),
    (("pk_test_", "pk_live_"), "pk_***"),
    (("xoxb-", "xoxp-"), "xox***"),
    (("ya29.",), "ya29.***"),
    (("ssh-rsa", "ssh-ed25519"), "ssh-***"),
)

_URL_SCHEMES: tuple[str, ...] = ("http://", "https://")


def generate_placeholder(key: str, value: str) -> str:
    """Return a short mask that hints at the kind of secret in `value`.

    Only meant for values already classified as secrets. `key` is accepted
    for symmetry with `is_secret` and does not influence the result.
    """

    _ = key
    if is_jwt(value):
        return JWT_PLACEHOLDER

    lowered = value.lower()
    if is_credentialed_url(value):
        for scheme in _URL_SCHEMES:
            if lowered.startswith(scheme):
                return f"{scheme}{MASK}"
        return URL_PLACEHOLDER

    for prefixes, placeholder in _PREFIX_PLACEHOLDERS:
        if lowered.startswith(prefixes):
            return placeholder
    return MASK
