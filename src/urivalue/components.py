"""
Extraction of the logical components of an already validated URI string.

Every function here is total: given a string accepted by :mod:`urivalue.grammar` it never raises, it returns empty
values for whatever is missing.
"""
import re
from functools import lru_cache
from typing import Dict, Mapping, NamedTuple, Optional
from urllib.parse import parse_qsl, urlencode

_STRUCTURE = re.compile(
    r"(?:(?P<scheme>[^:/?#]+):(?=//))?"
    r"(?://(?P<authority>[^/?#]*))?"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?",
    re.DOTALL,
)

_LEADING_TOKEN = re.compile(r"[^/?#]+")

_AUTHORITY = re.compile(
    r"(?:(?P<user>[^:@]*)(?::(?P<password>[^@]*))?@)?"
    r"(?P<host>\[[^\]]*\]|[^:]*)"
    r"(?::(?P<port>[0-9]*))?"
)


class Components(NamedTuple):
    scheme: str
    user: Optional[str]
    password: Optional[str]
    host: str
    port: Optional[int]
    path: str
    query: str
    fragment: str


def _split_authority(authority: str):
    match = _AUTHORITY.fullmatch(authority)
    if match is None:
        return None, None, authority, None
    port = match.group("port")
    return match.group("user"), match.group("password"), match.group("host"), int(port) if port else None


@lru_cache(maxsize=1024)
def split(raw: str) -> Components:
    """
    Split a raw URI string into its components.

    A ``//`` introduces a structural authority, either after ``scheme:`` or at the very start of a scheme relative
    reference such as ``//cdn.example/lib.js``. Without one the leading token (everything up to the first ``/``,
    ``?`` or ``#``) is read as the authority instead and removed from the path, so that routing identifiers such as
    ``{host}/path`` and ``container/path`` report ``{host}`` and ``container`` as their host.

    :param raw: A string accepted by the URI grammar.
    :return: The components of the string.
    """
    match = _STRUCTURE.fullmatch(raw)
    scheme = match.group("scheme") or ""
    authority = match.group("authority")
    path = match.group("path")

    if authority is None:
        token = _LEADING_TOKEN.match(path)
        authority = token.group(0) if token else ""
        path = path[len(authority):]

    user, password, host, port = _split_authority(authority)

    if path == "/":
        path = ""

    return Components(
        scheme=scheme,
        user=user,
        password=password,
        host=host,
        port=port,
        path=path,
        query=match.group("query") or "",
        fragment=match.group("fragment") or "",
    )


def parse_query(query: str) -> Dict[str, str]:
    """
    Decode a form encoded query string.

    ``+`` decodes to a space, percent escapes are decoded and a key without ``=`` maps to an empty string. When a key
    is repeated the last occurrence wins.
    """
    if not query:
        return {}
    return dict(parse_qsl(query, keep_blank_values=True))


def build_query(params: Mapping[str, str]) -> str:
    """
    Form encode a mapping, keeping its iteration order.
    """
    return urlencode(params)
