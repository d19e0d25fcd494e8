import pytest
import responses
from responses import matchers

from esasg.es.client import DEFAULT_URL, Client, ElasticsearchError
from esasg.es.settings import (
    ClusterGetSettingsService,
    ClusterPutSettingsService,
    Settings,
)

URL = DEFAULT_URL + "/_cluster/settings"
NAME = "cluster.routing.allocation.exclude._name"

DEFAULTS_REPLY = {
    "persistent": {},
    "transient": {},
    "defaults": {
        "cluster": {
            "name": "docker-cluster",
            "routing": {"allocation": {"enable": "all"}},
        }
    },
}


def test_settings_get_nested_and_flat():
    nested = Settings({"cluster": {"routing": {"allocation": {"exclude": {"_name": "foo"}}}}})
    flat = Settings({NAME: "bar"})
    assert nested.get(NAME).text == "foo"
    assert flat.get(NAME).text == "bar"


def test_settings_missing_and_null():
    s = Settings({"a": None})
    assert bool(s.get("a")) is True
    assert s.get("a").value is None
    assert bool(s.get("b")) is False
    assert s.get("b").text == ""
    assert bool(Settings()) is False


def test_settings_text_of_non_strings():
    s = Settings({"t": True, "n": 3, "o": {"x": 1}})
    assert s.get("t").text == "true"
    assert s.get("n").text == "3"
    assert s.get("o").text == '{"x":1}'


def test_settings_items():
    s = Settings({"a": "1", "b": {"c": "2"}})
    items = dict(s.items())
    assert items["a"].text == "1"
    assert items["b"].get("c").text == "2"
    assert list(Settings("scalar").items()) == []


def test_get_build_url():
    service = ClusterGetSettingsService(
        Client(), include_defaults=True, pretty=True, human=False, filter_path=["a", "b"]
    )
    assert service.build_url() == (
        "/_cluster/settings",
        {"pretty": "true", "include_defaults": "true", "filter_path": "a,b", "human": "false"},
    )
    assert ClusterGetSettingsService(Client()).build_url() == ("/_cluster/settings", {})


def test_get_success():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            URL,
            json=DEFAULTS_REPLY,
            match=[matchers.query_param_matcher({"include_defaults": "true"})],
        )
        resp = ClusterGetSettingsService(Client(), include_defaults=True).do()
    assert dict(resp.defaults.items())
    assert resp.defaults.get("cluster.routing.allocation.enable").text == "all"
    assert resp.persistent.value == {}


def test_get_without_defaults_leaves_them_unset():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, json=DEFAULTS_REPLY)
        resp = ClusterGetSettingsService(Client()).do()
    assert resp.defaults is None


def test_get_error():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, status=500, body="Internal Server Error")
        with pytest.raises(ElasticsearchError) as info:
            ClusterGetSettingsService(Client()).do()
    assert info.value.status == 500


def test_get_invalid_json():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, status=200, body="not json")
        with pytest.raises(ElasticsearchError, match="invalid json"):
            ClusterGetSettingsService(Client()).do()


def test_put_build_url():
    service = ClusterPutSettingsService(
        Client(), pretty=True, flat_settings=False, master_timeout="30s"
    )
    assert service.build_url() == (
        "/_cluster/settings",
        {"pretty": "true", "flat_settings": "false", "master_timeout": "30s"},
    )


def test_put():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.PUT,
            URL,
            match=[
                matchers.json_params_matcher(
                    {"transient": {NAME: "foo"}, "persistent": {NAME: "bar"}}
                )
            ],
            json={
                "transient": {"cluster": {"routing": {"allocation": {"exclude": {"_name": "foo"}}}}},
                "persistent": {"cluster": {"routing": {"allocation": {"exclude": {"_name": "bar"}}}}},
            },
        )
        resp = (
            ClusterPutSettingsService(Client())
            .transient(NAME, "foo")
            .persistent(NAME, "bar")
            .do()
        )
    assert resp.transient.get(NAME).text == "foo"
    assert resp.persistent.get(NAME).text == "bar"


def test_put_remove():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.PUT,
            URL,
            match=[
                matchers.json_params_matcher(
                    {"transient": {NAME: None}, "persistent": {NAME: None}}
                )
            ],
            json={},
        )
        resp = (
            ClusterPutSettingsService(Client())
            .transient(NAME, None)
            .persistent(NAME, None)
            .do()
        )
    assert resp.transient.get(NAME).value is None
    assert resp.persistent.get(NAME).value is None


def test_put_body_json_overrides_settings():
    body = {"persistent": {"x": "1"}}
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.PUT,
            URL,
            match=[matchers.json_params_matcher(body)],
            json={"persistent": {"x": "1"}, "transient": {}},
        )
        resp = ClusterPutSettingsService(Client(), body_json=body).transient("y", "2").do()
    assert resp.persistent.get("x").text == "1"


def test_put_error():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.PUT,
            URL,
            match=[
                matchers.json_params_matcher(
                    {"transient": {NAME: "foo"}, "persistent": {NAME: None}}
                )
            ],
            status=500,
            body="Internal Server Error",
        )
        with pytest.raises(ElasticsearchError) as info:
            (
                ClusterPutSettingsService(Client())
                .transient(NAME, "foo")
                .persistent(NAME, None)
                .do()
            )
    assert info.value.status == 500