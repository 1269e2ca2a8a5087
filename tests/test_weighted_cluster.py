from kourier.envoy.weighted_cluster import new_weighted_cluster


def test_new_weighted_cluster():
    got = new_weighted_cluster("test", 50, {"foo": "bar"})
    want = {
        "name": "test",
        "weight": 50,
        "request_headers_to_add": [
            {"header": {"key": "foo", "value": "bar"}, "append": False},
        ],
    }
    assert got == want


def test_new_weighted_cluster_without_headers():
    assert new_weighted_cluster("other", 100, None) == {"name": "other", "weight": 100}