"""JSON Pointer (RFC 6901) helpers for ``$ref`` fragments and node locations."""

import re
from urllib.parse import unquote

from openapi_graph.exceptions import MalformedPointerError

ROOT = "#"

_INVALID_ESCAPE = re.compile(r"~(?![01])")


def escape(token: str) -> str:
    """Escape a single reference token (``~`` -> ``~0``, ``/`` -> ``~1``)."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape(token: str) -> str:
    """Decode a single reference token, rejecting unknown ``~`` escapes."""
    if _INVALID_ESCAPE.search(token):
        raise MalformedPointerError(f"Invalid escape sequence in pointer token '{token}'")
    return token.replace("~1", "/").replace("~0", "~")


def append(location: str, *tokens: str | int) -> str:
    """Return the location of a child node, e.g. ``append("#/paths", "/pets")``."""
    return location + "".join("/" + escape(str(token)) for token in tokens)


def build(*tokens: str) -> str:
    return append(ROOT, *tokens)


def is_external(ref: str) -> bool:
    """True when ``ref`` addresses another document rather than a fragment of this one."""
    return bool(ref) and not ref.startswith("#")


def parse_pointer(ref: str) -> tuple[str, ...]:
    """Split an intra-document ``$ref`` into its decoded reference tokens.

    ``#`` addresses the root and yields an empty tuple. The fragment is
    percent-decoded before the JSON pointer escapes are applied.

    Raises:
        MalformedPointerError: empty value, external reference, fragment not
            starting with ``/`` or an invalid ``~`` escape.
    """
    if not ref:
        raise MalformedPointerError("Empty $ref value")
    if is_external(ref):
        raise MalformedPointerError(f"'{ref}' is not a document-local pointer")

    fragment = unquote(ref[1:])
    if fragment == "":
        return ()
    if not fragment.startswith("/"):
        raise MalformedPointerError(f"Pointer fragment of '{ref}' must start with '/'")

    try:
        return tuple(unescape(token) for token in fragment[1:].split("/"))
    except MalformedPointerError as e:
        raise MalformedPointerError(f"Malformed pointer '{ref}': {e.message}") from e
