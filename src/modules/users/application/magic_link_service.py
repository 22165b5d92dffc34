"""Magic link token helpers."""

import secrets
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def generate_magic_link_token(nbytes: int = 32) -> str:
    """Generate a URL-safe random token carrying ``nbytes`` of entropy."""
    if nbytes < 16:
        raise ValueError("magic link tokens need at least 128 bits of entropy")
    return secrets.token_urlsafe(nbytes)


def build_magic_link_url(base_url: str, token: str) -> str:
    """Embed ``token`` as the ``token`` query parameter of ``base_url``.

    Existing query parameters on the base URL are kept.
    """
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "token"]
    query.append(("token", token))
    return urlunsplit(parts._replace(query=urlencode(query)))
