from datetime import timedelta
from types import SimpleNamespace

import pytest

from kourier.configmap import (
    ConfigError,
    Kourier,
    default_config,
    new_config_from_config_map,
    new_config_from_map,
    parse_bool,
    parse_duration,
)

CASES = [
    ("default configuration", default_config(), {}),
    (
        "disable logging",
        Kourier(enable_service_access_logging=False, idle_timeout=timedelta(0)),
        {"enable-service-access-logging": "false"},
    ),
    (
        "enable proxy protocol, logging and internal cert",
        Kourier(
            enable_service_access_logging=True,
            enable_proxy_protocol=True,
            cluster_cert_secret="secret",
        ),
        {
            "enable-service-access-logging": "true",
            "enable-proxy-protocol": "true",
            "cluster-cert-secret": "secret",
        },
    ),
    (
        "enable proxy protocol and disable logging, empty internal cert",
        Kourier(
            enable_service_access_logging=False,
            enable_proxy_protocol=True,
            cluster_cert_secret="",
        ),
        {
            "enable-service-access-logging": "false",
            "enable-proxy-protocol": "true",
            "cluster-cert-secret": "",
        },
    ),
    (
        "set timeout to 200",
        Kourier(idle_timeout=timedelta(seconds=200)),
        {
            "enable-service-access-logging": "true",
            "enable-proxy-protocol": "false",
            "cluster-cert-secret": "",
            "stream-idle-timeout": "200s",
        },
    ),
    (
        "set isolation-traffic to port",
        Kourier(traffic_isolation="port"),
        {"traffic-isolation": "port"},
    ),
]


@pytest.mark.parametrize("name,want,data", CASES, ids=[c[0] for c in CASES])
def test_kourier_config(name, want, data):
    from_cm = new_config_from_config_map(SimpleNamespace(data=data))
    assert from_cm == want
    assert new_config_from_map(data) == from_cm


@pytest.mark.parametrize(
    "data",
    [
        {"enable-service-access-logging": "foo"},
        {"enable-proxy-protocol": "foo"},
    ],
    ids=["not a bool for logging", "not a bool for proxy protocol"],
)
def test_kourier_config_errors(data):
    with pytest.raises(ConfigError):
        new_config_from_config_map(SimpleNamespace(data=data))
    with pytest.raises(ConfigError):
        new_config_from_map(data)


def test_default_config_values():
    cfg = default_config()
    assert cfg.enable_service_access_logging is True
    assert cfg.enable_proxy_protocol is False
    assert cfg.idle_timeout == timedelta(0)


def test_config_map_mapping_form_and_nil_data():
    assert new_config_from_config_map({"data": {"traffic-isolation": "port"}}).traffic_isolation == "port"
    assert new_config_from_config_map(SimpleNamespace(data=None)) == default_config()


def test_invalid_duration_raises():
    with pytest.raises(ConfigError):
        new_config_from_map({"stream-idle-timeout": "forever"})


@pytest.mark.parametrize("text,expected", [("1", True), ("True", True), ("f", False), ("FALSE", False)])
def test_parse_bool(text, expected):
    assert parse_bool(text) is expected


@pytest.mark.parametrize("text", ["", "yes", "tRuE"])
def test_parse_bool_rejects(text):
    with pytest.raises(ValueError):
        parse_bool(text)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("200s", timedelta(seconds=200)),
        ("0", timedelta(0)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        ("-2m", timedelta(minutes=-2)),
        ("300ms", timedelta(milliseconds=300)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "5x", "s", "-"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)