"""
Configuration for urivalue.

Options are addressed as ``section.option`` and read, in increasing priority, from ``URIVALUE_*`` environment
variables, the site config file and the user config file. The ``probe`` section holds the settings of the HTTP probe
used by :meth:`urivalue.Uri.exists`, these are checked whenever they are loaded or set.
"""
import configparser
import os
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional, TextIO, Tuple, Union

import appdirs

APP_NAME = 'urivalue'
ENV_PREFIX = 'URIVALUE_'
CONFIG_FILE_NAME = 'urivalue.cfg'
PROBE_SECTION = 'probe'
USER_CONFIG_PATH_VARIABLE = ENV_PREFIX + 'USER_CONFIG_PATH'
SITE_CONFIG_PATH_VARIABLE = ENV_PREFIX + 'SITE_CONFIG_PATH'
_PATH_VARIABLES = (USER_CONFIG_PATH_VARIABLE, SITE_CONFIG_PATH_VARIABLE)


class ConfigError(ValueError):
    pass


class ProbeSettings(NamedTuple):
    timeout: float
    verify: Union[bool, str]
    agent: Optional[str]


DEFAULT_PROBE_SETTINGS = ProbeSettings(timeout=5.0, verify=True, agent=None)


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(f'probe.timeout must be a number of seconds, got {value!r}') from None
    if timeout <= 0:
        raise ConfigError(f'probe.timeout must be greater than zero, got {value!r}')
    return timeout


def _parse_verify(value: str) -> Union[bool, str]:
    state = configparser.ConfigParser.BOOLEAN_STATES.get(value.lower())
    if state is not None:
        return state
    if not os.path.exists(value):
        raise ConfigError(f'probe.verify must be a boolean or the path of a CA bundle, got {value!r}')
    return value


def _parse_agent(value: str) -> Optional[str]:
    return value or None


_PROBE_OPTIONS: Dict[str, Callable[[str], object]] = {
    'timeout': _parse_timeout,
    'verify': _parse_verify,
    'agent': _parse_agent,
}


def _parse_name(name: str) -> Tuple[str, str]:
    section, _, option = name.rpartition('.')
    if not section or not option:
        raise ConfigError(f'Option name {name!r} is not of the form section.option')
    return section, option


class Config:
    """
    Layered configuration for urivalue.

    Options are addressed as ``section.option``, e.g. ``probe.timeout``.
    """
    class Nothing:
        pass

    NOTHING = Nothing()

    _parser: configparser.ConfigParser
    _site_config_path: Path
    _user_config_path: Path
    _verbose: bool

    def __init__(self, file_name: str = CONFIG_FILE_NAME) -> None:
        # Values are paths and user agents, so '%' must not be treated as interpolation
        self._parser = configparser.ConfigParser(interpolation=None)
        self._site_config_path = Path(appdirs.site_config_dir(APP_NAME)) / file_name
        self._user_config_path = Path(appdirs.user_config_dir(APP_NAME)) / file_name
        self._verbose = False

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    @property
    def verbose(self) -> bool:
        return self._verbose

    def set_verbose(self, verbose: bool) -> None:
        self._verbose = verbose

    def _load_environment(self) -> None:
        for var, value in os.environ.items():
            if var.startswith(ENV_PREFIX) and var not in _PATH_VARIABLES:
                self.set_option(var[len(ENV_PREFIX):].replace('_', '.').lower(), value)

    def _load_user_config(self) -> None:
        path = self._user_config_path
        if path.exists() and path.stat().st_mode & 0o777 != 0o600:
            raise PermissionError(f'User configuration file {path} has incorrect permissions, expected 0600.')
        self._parser.read(path)

    def load(self, file: Optional[TextIO] = None) -> None:
        """
        Load the configuration.

        Environment variables are read first. ``URIVALUE_USER_CONFIG_PATH`` and ``URIVALUE_SITE_CONFIG_PATH`` relocate
        the config files, which otherwise live in appdirs.user_config_dir('urivalue') and
        appdirs.site_config_dir('urivalue'). The user file is read after the site file and overrides it. If a file is
        given it is read instead of both.

        :param file: An open config file to read instead of the site and user files.
        :raise PermissionError: If the user config file is readable by anyone but its owner.
        :raise ConfigError: If a ``probe`` option holds a value the probe cannot use.
        """
        self._load_environment()

        path = os.environ.get(USER_CONFIG_PATH_VARIABLE)
        if path:
            self._user_config_path = Path(path)
        path = os.environ.get(SITE_CONFIG_PATH_VARIABLE)
        if path:
            self._site_config_path = Path(path)

        if file is not None:
            self._parser.read_file(file)
        else:
            self._parser.read(self._site_config_path)
            self._load_user_config()

        self.probe_settings()

    def save(self) -> None:
        self._user_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._user_config_path, 'w') as file:
            self._parser.write(file)
        self._user_config_path.chmod(0o600)

    def probe_settings(self) -> ProbeSettings:
        """
        The typed ``probe`` settings, with defaults for whatever is not configured.

        :raise ConfigError: If a configured value is not usable.
        """
        values = {}
        for option, parse in _PROBE_OPTIONS.items():
            if self._parser.has_option(PROBE_SECTION, option):
                values[option] = parse(self._parser.get(PROBE_SECTION, option))
        return DEFAULT_PROBE_SETTINGS._replace(**values)

    def get_option(self, name: str, default=NOTHING) -> str:
        section, option = _parse_name(name)
        if self._parser.has_option(section, option):
            return self._parser.get(section, option)
        if default is not Config.NOTHING:
            return default
        raise KeyError(f'Option {name} not found in configuration')

    def set_option(self, name: str, value) -> None:
        section, option = _parse_name(name)
        value = str(value)
        if section == PROBE_SECTION:
            if option not in _PROBE_OPTIONS:
                raise ConfigError(f'Unknown probe option {name}, expected one of: {", ".join(_PROBE_OPTIONS)}')
            _PROBE_OPTIONS[option](value)
        if not self._parser.has_section(section):
            self._parser.add_section(section)
        self._parser.set(section, option, value)

    def delete_option(self, name: str) -> None:
        section, option = _parse_name(name)
        if not self._parser.has_option(section, option):
            raise KeyError(f'Option {name} not found in configuration')
        self._parser.remove_option(section, option)
        if not self._parser.options(section):
            self._parser.remove_section(section)

    def list_options(self) -> List[str]:
        return [f'{section}.{option}: {value}'
                for section in self._parser.sections()
                for option, value in self._parser.items(section)]
