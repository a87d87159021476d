"""Unit tests for MonitorSettings and endpoint loading."""

import pytest
import yaml
from pydantic import ValidationError

from uptime_monitor.config.endpoints import Endpoint, load_endpoints
from uptime_monitor.config.settings import MonitorSettings
from uptime_monitor.middleware.error_handler import ConfigurationError


# ---------------------------------------------------------------------------
# MonitorSettings
# ---------------------------------------------------------------------------


class TestMonitorSettings:
    def test_defaults_are_correct(self):
        settings = MonitorSettings()

        assert settings.config_path == "config.yaml"
        assert settings.log_file == "health_check.log"
        assert settings.log_level == "INFO"
        assert settings.interval_seconds == 15
        assert settings.probe_mode == "simulated"
        assert settings.probe_timeout_seconds == 5.0
        assert settings.max_concurrent_probes == 10
        assert settings.sink_max_retries == 3
        assert settings.sink_backoff_base_seconds == 1.0
        assert settings.api_host == "127.0.0.1"
        assert settings.api_port == 8001

    def test_env_prefix_is_uptime(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("UPTIME_INTERVAL_SECONDS", "2.5")
        monkeypatch.setenv("UPTIME_PROBE_MODE", "http")
        monkeypatch.setenv("UPTIME_CONFIG_PATH", "/etc/uptime/endpoints.yaml")

        settings = MonitorSettings()
        assert settings.interval_seconds == 2.5
        assert settings.probe_mode == "http"
        assert settings.config_path == "/etc/uptime/endpoints.yaml"

    def test_unknown_probe_mode_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("UPTIME_PROBE_MODE", "carrier-pigeon")
        with pytest.raises(ValidationError):
            MonitorSettings()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("interval_seconds", -1),
            ("probe_timeout_seconds", 0),
            ("max_concurrent_probes", 0),
            ("sink_max_retries", 0),
            ("api_port", 70000),
        ],
    )
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            MonitorSettings(**{field: value})


# ---------------------------------------------------------------------------
# load_endpoints
# ---------------------------------------------------------------------------


def _write(tmp_path, data) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(data if isinstance(data, str) else yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestLoadEndpoints:
    def test_loads_in_file_order(self, tmp_path):
        path = _write(
            tmp_path,
            [
                {"name": "A", "url": "http://a.example.com"},
                {"name": "B", "url": "http://b.example.com"},
            ],
        )
        endpoints = load_endpoints(path)
        assert [(e.name, e.url) for e in endpoints] == [
            ("A", "http://a.example.com"),
            ("B", "http://b.example.com"),
        ]
        assert endpoints[0].method == "GET"
        assert endpoints[0].headers is None

    def test_optional_request_fields(self, tmp_path):
        path = _write(
            tmp_path,
            [
                {
                    "name": "post",
                    "url": "https://fetch.com/some/post/endpoint",
                    "method": "POST",
                    "headers": {"content-type": "application/json"},
                    "body": '{"foo":"bar"}',
                }
            ],
        )
        (endpoint,) = load_endpoints(path)
        assert endpoint.method == "POST"
        assert endpoint.headers == {"content-type": "application/json"}
        assert endpoint.body == '{"foo":"bar"}'

    def test_duplicates_are_kept(self, tmp_path):
        entry = {"name": "A", "url": "http://a.example.com"}
        assert len(load_endpoints(_write(tmp_path, [entry, entry]))) == 2

    def test_empty_list_is_allowed(self, tmp_path):
        assert load_endpoints(_write(tmp_path, "[]")) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_endpoints(str(tmp_path / "nope.yaml"))
        assert exc_info.value.details["path"].endswith("nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_endpoints(_write(tmp_path, "- name: [unclosed\n"))

    @pytest.mark.parametrize("document", ["name: A\nurl: http://a\n", "", "42\n"])
    def test_top_level_must_be_list(self, tmp_path, document):
        with pytest.raises(ConfigurationError):
            load_endpoints(_write(tmp_path, document))

    @pytest.mark.parametrize(
        "entry",
        [
            {"url": "http://a.example.com"},
            {"name": "A"},
            {"name": "", "url": "http://a.example.com"},
            {"name": "A", "url": ""},
            {"name": "   ", "url": "http://a.example.com"},
            {"name": "A", "url": " \t "},
            "just a string",
        ],
    )
    def test_invalid_entry_names_its_index(self, tmp_path, entry):
        path = _write(tmp_path, [{"name": "ok", "url": "http://ok.test"}, entry])
        with pytest.raises(ConfigurationError) as exc_info:
            load_endpoints(path)
        assert exc_info.value.details["index"] == 1


class TestEndpointModel:
    def test_is_frozen(self):
        endpoint = Endpoint(name="A", url="http://a.test")
        with pytest.raises(ValidationError):
            endpoint.name = "B"  # type: ignore[misc]

    def test_value_equality(self):
        a = Endpoint(name="A", url="http://a.test")
        assert a == Endpoint(name="A", url="http://a.test")

    def test_surrounding_whitespace_is_stripped(self):
        endpoint = Endpoint(name="  A ", url=" http://a.test\n")
        assert (endpoint.name, endpoint.url) == ("A", "http://a.test")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Endpoint(name="   ", url="http://a.test")
