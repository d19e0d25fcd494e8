from datetime import datetime, timezone

import pytest
import responses
from responses import matchers

from esasg.es.cat_shards import CatShardsRow, CatShardsService
from esasg.es.client import Client, ElasticsearchError

URL = "http://localhost:9200"
NODE_ID = "node-id-placeholder-0001"
NODE_NAME = "es-node-1"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


ROW_STARTED = {
    "completion.size": "0b",
    "docs": "0",
    "fielddata.evictions": "0",
    "fielddata.memory_size": "0b",
    "flush.total": "0",
    "flush.total_time": "0s",
    "get.current": "0",
    "get.exists_time": "0s",
    "get.exists_total": "0",
    "get.missing_time": "0s",
    "get.missing_total": "0",
    "get.time": "0s",
    "get.total": "0",
    "id": NODE_ID,
    "index": "twitter",
    "indexing.delete_current": "0",
    "indexing.delete_time": "0s",
    "indexing.delete_total": "0",
    "indexing.index_current": "0",
    "indexing.index_failed": "0",
    "indexing.index_time": "0s",
    "indexing.index_total": "0",
    "ip": "10.20.0.2",
    "merges.current": "0",
    "merges.current_docs": "0",
    "merges.current_size": "0b",
    "merges.total": "0",
    "merges.total_docs": "0",
    "merges.total_size": "0b",
    "merges.total_time": "0s",
    "node": NODE_NAME,
    "prirep": "p",
    "query_cache.evictions": "0",
    "query_cache.memory_size": "0b",
    "recoverysource.type": None,
    "refresh.listeners": "0",
    "refresh.time": "0s",
    "refresh.total": "2",
    "search.fetch_current": "0",
    "search.fetch_time": "0s",
    "search.fetch_total": "0",
    "search.open_contexts": "0",
    "search.query_current": "0",
    "search.query_time": "0s",
    "search.query_total": "0",
    "search.scroll_current": "0",
    "search.scroll_time": "0s",
    "search.scroll_total": "0",
    "segments.count": "0",
    "segments.fixed_bitset_memory": "0b",
    "segments.index_writer_memory": "0b",
    "segments.memory": "0b",
    "segments.version_map_memory": "0b",
    "seq_no.global_checkpoint": "-1",
    "seq_no.local_checkpoint": "-1",
    "seq_no.max": "-1",
    "shard": "0",
    "state": "STARTED",
    "store": "230b",
    "sync_id": None,
    "unassigned.at": None,
    "unassigned.details": None,
    "unassigned.for": None,
    "unassigned.reason": None,
    "warmer.current": "0",
    "warmer.total": "1",
    "warmer.total_time": "1ms",
}

ROW_UNASSIGNED = {
    "completion.size": None,
    "docs": None,
    "id": None,
    "index": "twitter",
    "ip": None,
    "node": None,
    "prirep": "r",
    "recoverysource.type": "peer",
    "shard": "0",
    "state": "UNASSIGNED",
    "store": None,
    "unassigned.at": "2019-09-30T19:03:02.514Z",
    "unassigned.details": None,
    "unassigned.for": "27.1s",
    "unassigned.reason": "INDEX_CREATED",
    "warmer.total": None,
}

WANT = [
    CatShardsRow(
        completion_size="0b",
        docs=0,
        fielddata_evictions=0,
        fielddata_memory_size="0b",
        flush_total=0,
        flush_total_time="0s",
        get_current=0,
        get_exists_time="0s",
        get_exists_total=0,
        get_missing_time="0s",
        get_missing_total=0,
        get_time="0s",
        get_total=0,
        id=NODE_ID,
        index="twitter",
        indexing_delete_current=0,
        indexing_delete_time="0s",
        indexing_delete_total=0,
        indexing_index_current=0,
        indexing_index_failed=0,
        indexing_index_time="0s",
        indexing_index_total=0,
        ip="10.20.0.2",
        merges_current=0,
        merges_current_docs=0,
        merges_current_size="0b",
        merges_total=0,
        merges_total_docs=0,
        merges_total_size="0b",
        merges_total_time="0s",
        node=NODE_NAME,
        primary_or_replica="p",
        query_cache_evictions=0,
        query_cache_memory_size="0b",
        recovery_source_type=None,
        refresh_listeners=0,
        refresh_time="0s",
        refresh_total=2,
        search_fetch_current=0,
        search_fetch_time="0s",
        search_fetch_total=0,
        search_open_contexts=0,
        search_query_current=0,
        search_query_time="0s",
        search_query_total=0,
        search_scroll_current=0,
        search_scroll_time="0s",
        search_scroll_total=0,
        segments_count=0,
        segments_fixed_bitset_memory="0b",
        segments_index_writer_memory="0b",
        segments_memory="0b",
        segments_version_map_memory="0b",
        seq_no_global_checkpoint="-1",
        seq_no_local_checkpoint="-1",
        seq_no_max="-1",
        shard="0",
        state="STARTED",
        store="230b",
        sync_id=None,
        unassigned_at=None,
        unassigned_details=None,
        unassigned_for=None,
        unassigned_reason=None,
        warmer_current=0,
        warmer_total=1,
        warmer_total_time="1ms",
    ),
    CatShardsRow(
        index="twitter",
        primary_or_replica="r",
        recovery_source_type="peer",
        shard="0",
        state="UNASSIGNED",
        unassigned_at=datetime(2019, 9, 30, 19, 3, 2, 514000, tzinfo=timezone.utc),
        unassigned_for="27.1s",
        unassigned_reason="INDEX_CREATED",
    ),
]


def test_success(mocked):
    mocked.add(
        responses.GET,
        URL + "/_cat/shards",
        json=[ROW_STARTED, ROW_UNASSIGNED],
        match=[matchers.query_param_matcher({"format": "json", "h": "*"})],
    )
    got = CatShardsService(Client(URL), columns=["*"]).do()
    assert got == WANT
    assert len(mocked.calls) == 1


def test_error(mocked):
    mocked.add(
        responses.GET,
        URL + "/_cat/shards",
        status=500,
        body="Internal Server Error",
    )
    with pytest.raises(ElasticsearchError):
        CatShardsService(Client(URL)).do()
    assert len(mocked.calls) == 1


def test_build_url_defaults():
    path, params = CatShardsService(Client(URL)).build_url()
    assert path == "/_cat/shards"
    assert params == {"format": "json"}


def test_build_url_with_options():
    service = CatShardsService(
        Client(URL),
        index="twitter",
        bytes_unit="k",
        local=False,
        master_timeout="30s",
        columns=["index", "shard"],
        sort=["index", "store"],
        pretty=True,
    )
    path, params = service.build_url()
    assert path == "/_cat/shards/twitter"
    assert params == {
        "format": "json",
        "pretty": "true",
        "bytes": "k",
        "local": "false",
        "master_timeout": "30s",
        "h": "index,shard",
        "s": "index,store",
    }


def test_build_url_local_true():
    _, params = CatShardsService(Client(URL), local=True).build_url()
    assert params["local"] == "true"


def test_row_from_dict_ignores_unknown_columns():
    row = CatShardsRow.from_dict({"index": "twitter", "shard": "1", "unknown": "x"})
    assert row == CatShardsRow(index="twitter", shard="1")


def test_row_rejects_unquoted_integer():
    with pytest.raises(ValueError):
        CatShardsRow.from_dict({"docs": 5})


def test_row_rejects_bad_time():
    with pytest.raises(ValueError):
        CatShardsRow.from_dict({"unassigned.at": "yesterday"})


def test_non_array_reply_raises(mocked):
    mocked.add(responses.GET, URL + "/_cat/shards", json={"index": "twitter"})
    with pytest.raises(ValueError):
        CatShardsService(Client(URL)).do()