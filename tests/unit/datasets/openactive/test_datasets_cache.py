"""Unit tests for the OpenActive datasets cache."""

from __future__ import annotations

import json

import pytest

from activity_pulse.datasets.openactive.cache import CatalogueError, DatasetsCache

CATALOGUE = [
    {
        "id": "better-sessions",
        "title": "Better Leisure Sessions",
        "data_url": "https://better.example.com/feeds/session-series",
        "publisher": "GLL",
    },
    {
        "id": 2,
        "title": "Parkrun Events",
        "data_url": "https://parkrun.example.com/feeds/events",
    },
]


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache" / "datasets.json"


@pytest.fixture
def cache(test_config, cache_path):
    return DatasetsCache(lambda: CATALOGUE, config=test_config, path=cache_path)


def test_update_returns_ok(cache, cache_path):
    assert cache.update() == "OK"
    assert cache_path.exists()


def test_all_returns_records(cache):
    cache.update()

    datasets = cache.all()

    assert [d["title"] for d in datasets] == ["Better Leisure Sessions", "Parkrun Events"]
    for dataset in datasets:
        assert {"id", "title", "data_url"} <= set(dataset)


def test_extra_keys_kept(cache):
    cache.update()
    assert cache.all()[0]["publisher"] == "GLL"


def test_all_before_update(cache):
    assert cache.all() == []
    assert cache.updated_at() is None


def test_updated_at(cache):
    cache.update()
    assert cache.updated_at() is not None


def test_file_layout(cache, cache_path):
    cache.update()

    content = json.loads(cache_path.read_text())

    assert len(content["datasets"]) == 2
    assert "updated_at" in content


def test_invalid_record_raises(test_config, cache_path):
    cache = DatasetsCache(
        lambda: [CATALOGUE[0], {"id": "3", "title": "No feed"}],
        config=test_config,
        path=cache_path,
    )

    with pytest.raises(CatalogueError) as exc_info:
        cache.update()

    assert exc_info.value.index == 1
    assert "data_url" in str(exc_info.value)
    assert not cache_path.exists()


def test_update_replaces_previous_catalogue(test_config, cache_path):
    DatasetsCache(lambda: CATALOGUE, config=test_config, path=cache_path).update()
    DatasetsCache(lambda: CATALOGUE[1:], config=test_config, path=cache_path).update()

    cache = DatasetsCache(lambda: [], config=test_config, path=cache_path)
    assert [d["id"] for d in cache.all()] == [2]
