import logging
import re
from typing import Any, Callable, Dict, Optional

from . import grammar
from .components import Components, build_query, parse_query, split
from .errors import InvalidUriError
from .probe import EXISTING_STATUSES, HttpProbe, Probe, ProbeError

logger = logging.getLogger(__name__)

_SCHEME_PREFIX = re.compile(r"(?:(?:http|https):)?//", re.IGNORECASE)


class Uri:
    """
    Immutable, validated URI.

    The only state held is the raw string the Uri was created from. All components are derived from that string on
    access, and all ``with_*`` methods return a new Uri, leaving the original untouched.
    """

    __slots__ = ("_raw",)

    def __init__(self, uri: str) -> None:
        """
        Create a Uri by validating the given string.

        :param uri: The URI string. It is stored verbatim, no normalisation is applied.
        :raise InvalidUriError: If the string does not match the URI grammar, has neither a host nor a path, or has
            a scheme, a port or user info without a host.
        """
        if not grammar.validate(uri):
            logger.debug("rejected %r: grammar mismatch", uri)
            raise InvalidUriError(uri, "does not match the URI grammar")
        components = split(uri)
        if not components.host and not components.path:
            logger.debug("rejected %r: no host or path", uri)
            raise InvalidUriError(uri, "has neither host nor path")
        if not components.host and (components.port is not None or components.user is not None):
            logger.debug("rejected %r: authority without host", uri)
            raise InvalidUriError(uri, "has a port or user info but no host")
        if not components.host and components.scheme:
            logger.debug("rejected %r: scheme without host", uri)
            raise InvalidUriError(uri, "has a scheme but no host")
        object.__setattr__(self, "_raw", uri)

    @classmethod
    def from_string(cls, uri: str) -> "Uri":
        return cls(uri)

    @classmethod
    def is_valid(cls, uri: Any, predicate: Optional[Callable[["Uri"], Any]] = None) -> bool:
        """
        Check whether a value is a valid URI, optionally applying an extra check to the parsed Uri.

        :param uri: A string, or a Uri which is re-validated from its string form.
        :param predicate: Called with the parsed Uri when validation succeeds, its truthiness is the result.
        :return: False if the value is not a valid URI, otherwise True or the result of the predicate.
        """
        try:
            instance = cls(str(uri) if isinstance(uri, Uri) else uri)
        except InvalidUriError:
            return False
        if predicate is None:
            return True
        return bool(predicate(instance))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def raw(self) -> str:
        return self._raw

    def __str__(self):
        return self._raw

    def __repr__(self):
        return f"Uri({self._raw!r})"

    def __eq__(self, other):
        if not isinstance(other, Uri):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def __reduce__(self):
        return type(self), (self._raw,)

    @property
    def _components(self) -> Components:
        return split(self._raw)

    # Accessors

    @property
    def scheme(self) -> str:
        return self._components.scheme

    @property
    def user(self) -> Optional[str]:
        return self._components.user

    @property
    def password(self) -> Optional[str]:
        return self._components.password

    @property
    def user_info(self) -> str:
        """``user`` or ``user:password``, empty if the URI carries no credentials."""
        components = self._components
        if not components.user:
            return ""
        if components.password:
            return f"{components.user}:{components.password}"
        return components.user

    @property
    def host(self) -> str:
        return self._components.host

    @property
    def port(self) -> Optional[int]:
        return self._components.port

    @property
    def authority(self) -> str:
        authority = self.host
        if self.user_info:
            authority = f"{self.user_info}@{authority}"
        if self.port is not None:
            authority += f":{self.port}"
        return authority

    @property
    def path(self) -> str:
        return self._components.path

    @property
    def query(self) -> str:
        return self._components.query

    @property
    def fragment(self) -> str:
        return self._components.fragment

    @property
    def query_map(self) -> Dict[str, str]:
        """The decoded query parameters, the last occurrence of a repeated key wins."""
        return parse_query(self.query)

    @property
    def domain_suffix(self) -> Optional[str]:
        """
        The last label of a dotted host, e.g. ``com`` for ``www.google.com``.

        None for an empty host or a single label host such as ``container``.
        """
        labels = self.host.split(".")
        if len(labels) < 2:
            return None
        return labels[-1] or None

    @property
    def file_name(self) -> Optional[str]:
        path = self.path
        if not path or path.endswith("/"):
            return None
        return path.rsplit("/", 1)[-1]

    # Predicates

    @property
    def is_https(self) -> bool:
        return self.scheme.lower() == "https"

    @property
    def has_user(self) -> bool:
        return bool(self.user)

    @property
    def has_password(self) -> bool:
        return bool(self.password)

    @property
    def has_host(self) -> bool:
        return bool(self.host)

    @property
    def has_port(self) -> bool:
        return self.port is not None

    @property
    def has_path(self) -> bool:
        return bool(self.path)

    @property
    def has_query(self) -> bool:
        return bool(self.query)

    @property
    def has_fragment(self) -> bool:
        return bool(self.fragment)

    # Derivations

    @classmethod
    def _rebuild(cls, scheme: str, user_info: str, host: str, port: Optional[int], path: str, query: str,
                 fragment: str) -> "Uri":
        uri = ""
        if scheme:
            uri += f"{scheme}://"
        if user_info:
            uri += f"{user_info}@"
        uri += host
        if port is not None:
            uri += f":{port}"
        uri += path
        if query:
            uri += f"?{query}"
        if fragment:
            uri += f"#{fragment}"
        return cls(uri)

    def _replace(self, **changes) -> "Uri":
        parts = dict(
            scheme=self.scheme,
            user_info=self.user_info,
            host=self.host,
            port=self.port,
            path=self.path,
            query=self.query,
            fragment=self.fragment,
        )
        parts.update(changes)
        return self._rebuild(**parts)

    def with_scheme(self, scheme: str) -> "Uri":
        """
        Return a copy with the scheme prefix replaced.

        Only the leading ``http://``, ``https://`` or scheme relative ``//`` is rewritten, the rest of the string is
        kept exactly as is.

        :param scheme: The new scheme, or an empty string to drop the scheme.
        """
        match = _SCHEME_PREFIX.match(self._raw)
        rest = self._raw[match.end():] if match else self._raw
        prefix = f"{scheme}://" if scheme else ""
        return type(self)(prefix + rest)

    def with_user_info(self, user: str, password: Optional[str] = None) -> "Uri":
        user_info = user or ""
        if user and password:
            user_info += f":{password}"
        return self._replace(user_info=user_info)

    def with_host(self, host: str) -> "Uri":
        return self._replace(host=host)

    def with_port(self, port: Optional[int]) -> "Uri":
        return self._replace(port=port)

    def with_path(self, path: str) -> "Uri":
        return self._replace(path=path)

    def with_query(self, query: str) -> "Uri":
        """
        Return a copy with the given query parameters merged into the existing ones.

        Parameters in ``query`` overwrite existing parameters of the same name, all other existing parameters are
        kept. A query that decodes to no parameters at all, such as an empty string, clears the query instead.

        :param query: A form encoded query string, e.g. ``w=185&h=55``.
        """
        params = parse_query(query)
        if params:
            merged = self.query_map
            merged.update(params)
            new_query = build_query(merged)
        else:
            new_query = ""
        return self._replace(query=new_query)

    def with_fragment(self, fragment: str) -> "Uri":
        return self._replace(fragment=fragment)

    def exists(self, probe: Optional[Probe] = None) -> bool:
        """
        Check whether the resource behind the URI answers with 200, 301 or 302.

        Any transport failure counts as the resource not existing.

        :param probe: The network collaborator to ask. Defaults to an :class:`urivalue.probe.HttpProbe` built from the
            loaded configuration, which is closed again once the request is done.
        :raise ConfigError: If no probe is given and the configured probe settings are not usable.
        :raise PermissionError: If no probe is given and the user configuration file has incorrect permissions.
        """
        if probe is None:
            with HttpProbe.from_config() as default_probe:
                return self.exists(default_probe)
        try:
            status = probe.status(self._raw)
        except ProbeError as ex:
            logger.debug("probe failed for %s: %s", self._raw, ex)
            return False
        return status in EXISTING_STATUSES
