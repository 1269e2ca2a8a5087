import pytest

from kourier import config


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("CLUSTER_DOMAIN", "cluster.local")
    monkeypatch.setenv("SYSTEM_NAMESPACE", "knative-serving")
    monkeypatch.delenv("KOURIER_GATEWAY_NAMESPACE", raising=False)
    monkeypatch.delenv("SERVING_NAMESPACE", raising=False)
    return monkeypatch


def test_service_hostnames_with_gateway_namespace(env):
    env.setenv("KOURIER_GATEWAY_NAMESPACE", "kourier-system")
    external, internal = config.service_hostnames()
    assert external == "kourier.kourier-system.svc.cluster.local"
    assert internal == "kourier-internal.kourier-system.svc.cluster.local"


def test_gateway_namespace_falls_back_to_system_namespace(env):
    assert config.gateway_namespace() == "knative-serving"


def test_serving_namespace_prefers_env(env):
    env.setenv("SERVING_NAMESPACE", "my-serving")
    assert config.serving_namespace() == "my-serving"


def test_serving_namespace_falls_back(env):
    assert config.serving_namespace() == "knative-serving"


def test_missing_system_namespace_raises(env):
    env.delenv("SYSTEM_NAMESPACE")
    with pytest.raises(RuntimeError):
        config.gateway_namespace()


def test_listener_service_hostnames(env):
    env.setenv("KOURIER_GATEWAY_NAMESPACE", "kourier-system")
    hostname = config.listener_service_hostnames("8081")
    assert hostname == config.get_service_hostname("kourier-isolation-8081", "kourier-system")
    assert hostname.startswith("kourier-isolation-8081.kourier-system.svc.")


def test_get_service_hostname_uses_cluster_domain(env):
    env.setenv("CLUSTER_DOMAIN", "example.com")
    assert config.get_service_hostname("svc", "ns") == "svc.ns.svc.example.com"


def test_cluster_domain_from_resolv_conf(env, tmp_path):
    env.delenv("CLUSTER_DOMAIN")
    resolv = tmp_path / "resolv.conf"
    resolv.write_text("nameserver 10.0.0.10\nsearch default.svc.example.com svc.example.com example.com\n")
    assert config._cluster_domain_name(resolv) == "example.com"


def test_cluster_domain_default_without_resolv_conf(env, tmp_path):
    env.delenv("CLUSTER_DOMAIN")
    assert config._cluster_domain_name(tmp_path / "missing") == config.DEFAULT_CLUSTER_DOMAIN


def test_get_disable_http2():
    assert config.get_disable_http2({"kourier.knative.dev/disable-http2": "true"}) == "true"
    assert config.get_disable_http2({"other": "x"}) == ""
    assert config.get_disable_http2(None) == ""