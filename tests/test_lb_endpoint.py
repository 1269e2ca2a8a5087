from kourier.envoy.lb_endpoint import new_lb_endpoint


def test_new_lb_endpoint_address_and_port():
    endpoint = new_lb_endpoint("127.0.0.1", 8080)
    socket_address = endpoint["endpoint"]["address"]["socket_address"]
    assert socket_address["address"] == "127.0.0.1"
    assert socket_address["port_value"] == 8080


def test_new_lb_endpoint_is_tcp_and_ipv4_compatible():
    socket_address = new_lb_endpoint("10.0.0.1", 443)["endpoint"]["address"]["socket_address"]
    assert socket_address["protocol"] == "TCP"
    assert socket_address["ipv4_compat"] is True