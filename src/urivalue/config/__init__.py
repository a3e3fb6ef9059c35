from .config import Config, ConfigError, ProbeSettings, DEFAULT_PROBE_SETTINGS

__all__ = ['Config', 'ConfigError', 'ProbeSettings', 'DEFAULT_PROBE_SETTINGS']
