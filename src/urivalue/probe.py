"""
Network collaborator used by :meth:`urivalue.uri.Uri.exists`.

The value type itself never talks to the network, it asks a probe for the HTTP status of its string form. Anything
implementing :class:`Probe` can be passed to ``Uri.exists``, which is how tests avoid real requests.
"""
import logging
import sys
from typing import Callable, Optional, Protocol, TYPE_CHECKING, Union

from .config import Config, DEFAULT_PROBE_SETTINGS

if TYPE_CHECKING or "sphinx" in sys.modules:
    # Only importing these for type checking and documentation generation in order to speed up runtime startup.
    import requests

logger = logging.getLogger(__name__)

EXISTING_STATUSES = (200, 301, 302)
DEFAULT_TIMEOUT = DEFAULT_PROBE_SETTINGS.timeout


class ProbeError(RuntimeError):
    pass


class Probe(Protocol):
    def status(self, url: str) -> int:
        """
        Return the HTTP status returned for the URL.

        :raise ProbeError: If no response could be obtained.
        """
        ...


def try_request(func: Callable) -> Callable:
    def wrapped_func(self, url, *args, **kwargs):
        import requests

        try:
            return func(self, url, *args, **kwargs)
        except requests.RequestException as ex:
            logger.debug("request to %s failed: %s", url, ex)
            raise ProbeError(f"Request to {url} failed: {ex}") from ex

    return wrapped_func


class HttpProbe:
    """
    Probe issuing a HEAD request with redirects disabled.

    A session created by the probe itself is closed by :meth:`close`, or on leaving a ``with`` block. An injected
    session is left for its owner to close.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verify: Union[bool, str] = True,
                 user_agent: Optional[str] = None, session: Optional["requests.Session"] = None) -> None:
        """
        Create a new HttpProbe.

        @param timeout: seconds to wait for the server before giving up.
        @param verify: whether to verify TLS certificates, or the path of the CA bundle to verify them against.
        @param user_agent: value for the User-Agent header, the requests default is used if not given.
        @param session: session to send requests with, a new one is created if not given.
        """
        self._timeout = timeout
        self._verify = verify
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "HttpProbe":
        """
        Create a probe from the ``probe`` settings of the configuration.

        @param config: the configuration to use, the site and user configuration is loaded if not given.
        @raise ConfigError: if a probe setting is not usable.
        @raise PermissionError: if the user configuration file has incorrect permissions.
        """
        if config is None:
            config = Config()
            config.load()
        settings = config.probe_settings()
        return cls(timeout=settings.timeout, verify=settings.verify, user_agent=settings.agent)

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def verify(self) -> Union[bool, str]:
        return self._verify

    def _get_session(self) -> "requests.Session":
        if self._session is None:
            import requests

            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpProbe":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @try_request
    def status(self, url: str) -> int:
        logger.debug("HEAD %s", url)
        res = self._get_session().head(
            url, headers=self._headers, timeout=self._timeout, verify=self._verify, allow_redirects=False
        )
        return res.status_code
