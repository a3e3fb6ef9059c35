import os
from io import StringIO
from unittest import mock

import pytest
import requests

from urivalue import Uri
from urivalue.config import Config, ConfigError
from urivalue.probe import DEFAULT_TIMEOUT, HttpProbe, ProbeError


def test_status_sends_head_request():
    session = mock.Mock()
    session.head.return_value.status_code = 200
    probe = HttpProbe(session=session)

    assert probe.status("https://github.com/ginsen/uri") == 200
    session.head.assert_called_once_with(
        "https://github.com/ginsen/uri", headers={}, timeout=DEFAULT_TIMEOUT, verify=True, allow_redirects=False
    )


def test_status_sends_user_agent():
    session = mock.Mock()
    session.head.return_value.status_code = 404
    probe = HttpProbe(timeout=1.5, verify=False, user_agent="urivalue-test", session=session)

    assert probe.status("https://foo.com") == 404
    session.head.assert_called_once_with(
        "https://foo.com", headers={"User-Agent": "urivalue-test"}, timeout=1.5, verify=False, allow_redirects=False
    )


@pytest.mark.parametrize("error", [
    requests.ConnectionError("refused"),
    requests.Timeout("too slow"),
    requests.exceptions.MissingSchema("no scheme"),
])
def test_transport_failure_raises_probe_error(error):
    session = mock.Mock()
    session.head.side_effect = error
    probe = HttpProbe(session=session)

    with pytest.raises(ProbeError, match="https://foo.com"):
        probe.status("https://foo.com")


def test_other_errors_propagate():
    session = mock.Mock()
    session.head.side_effect = KeyError("bug")
    probe = HttpProbe(session=session)

    with pytest.raises(KeyError):
        probe.status("https://foo.com")


@mock.patch("requests.Session")
def test_session_created_lazily(session_cls):
    session_cls.return_value.head.return_value.status_code = 302
    probe = HttpProbe()
    session_cls.assert_not_called()

    assert probe.status("https://foo.com") == 302
    assert probe.status("https://foo.com") == 302
    session_cls.assert_called_once_with()


def test_from_config():
    config = Config()
    config.load(file=StringIO("""
[probe]
timeout = 10
verify = false
agent = urivalue-test
"""))
    probe = HttpProbe.from_config(config)
    assert probe.timeout == 10.0
    assert probe.verify is False


def test_from_config_passes_ca_bundle_through(tmp_path):
    bundle = tmp_path / "ca-bundle.pem"
    bundle.write_text("")
    config = Config()
    config.load(file=StringIO(f"[probe]\nverify = {bundle}\n"))
    assert HttpProbe.from_config(config).verify == str(bundle)


def test_from_config_defaults():
    config = Config()
    config.load(file=StringIO(""))
    probe = HttpProbe.from_config(config)
    assert probe.timeout == DEFAULT_TIMEOUT
    assert probe.verify is True


def test_uri_exists_through_http_probe():
    session = mock.Mock()
    session.head.return_value.status_code = 301
    assert Uri("https://github.com/ginsen/uri").exists(HttpProbe(session=session))


def test_host_less_uri_does_not_exist():
    session = mock.Mock()
    session.head.side_effect = requests.exceptions.MissingSchema("no scheme")
    assert not Uri("container/path").exists(HttpProbe(session=session))


@mock.patch("requests.Session")
def test_close_releases_own_session(session_cls):
    session_cls.return_value.head.return_value.status_code = 200
    with HttpProbe() as probe:
        assert probe.status("https://foo.com") == 200
    session_cls.return_value.close.assert_called_once_with()


def test_close_leaves_injected_session_open():
    session = mock.Mock()
    session.head.return_value.status_code = 200
    with HttpProbe(session=session) as probe:
        probe.status("https://foo.com")
    session.close.assert_not_called()


def test_close_without_request():
    probe = HttpProbe()
    probe.close()
    probe.close()


@mock.patch("requests.Session")
def test_default_probe_is_closed_after_exists(session_cls, tmp_path):
    session_cls.return_value.head.return_value.status_code = 302
    env = {
        'URIVALUE_USER_CONFIG_PATH': str(tmp_path / "user.cfg"),
        'URIVALUE_SITE_CONFIG_PATH': str(tmp_path / "site.cfg"),
    }
    with mock.patch.dict(os.environ, env, clear=True):
        assert Uri("https://github.com/ginsen/uri").exists()
    session_cls.return_value.close.assert_called_once_with()


def test_exists_reports_unusable_configuration(tmp_path):
    user_file = tmp_path / "user.cfg"
    user_file.write_text("[probe]\ntimeout = soon\n")
    user_file.chmod(0o600)
    env = {
        'URIVALUE_USER_CONFIG_PATH': str(user_file),
        'URIVALUE_SITE_CONFIG_PATH': str(tmp_path / "site.cfg"),
    }
    with mock.patch.dict(os.environ, env, clear=True), pytest.raises(ConfigError):
        Uri("https://github.com/ginsen/uri").exists()
