import requests

from services.retrieval.manifest_loader import ImageStore, validate_manifest

from conftest import FakeResponse


def _store(monkeypatch, response, token=""):
    seen = {}

    def fake_get(url, headers=None, timeout=None):
        seen.update(url=url, headers=headers)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "get", fake_get)
    return ImageStore("https://raw.example.com/links.json", token=token), seen


def test_malformed_categories_are_dropped(monkeypatch):
    manifest = {"a": ["x", "y"], "b": "not-an-array", "c": [1, 2]}
    store, _ = _store(monkeypatch, FakeResponse(200, manifest))

    assert store.load() is True
    assert store.initialized
    assert store.categories == ["a"]
    assert store.get("a") == ["x", "y"]
    assert store.total_images == 2


def test_validate_manifest_accepts_empty_list():
    assert validate_manifest({"empty": [], "mixed": ["a", None]}) == {"empty": []}


def test_non_object_manifest_leaves_store_uninitialized(monkeypatch):
    store, _ = _store(monkeypatch, FakeResponse(200, ["x", "y"]))
    assert store.load() is False
    assert not store.initialized
    assert store.categories == []
    assert "JSON object" in store.last_error


def test_http_failure(monkeypatch):
    store, _ = _store(monkeypatch, FakeResponse(404, text="Not Found"))
    assert store.load() is False
    assert "404" in store.last_error


def test_invalid_json(monkeypatch):
    store, _ = _store(monkeypatch, FakeResponse(200, None, text="<html>"))
    assert store.load() is False


def test_transport_failure(monkeypatch):
    store, _ = _store(monkeypatch, requests.ConnectionError("dns"))
    assert store.load() is False
    assert not store.initialized


def test_no_valid_categories_is_uninitialized(monkeypatch):
    store, _ = _store(monkeypatch, FakeResponse(200, {"b": "nope"}))
    assert store.load() is False
    assert store.categories == []


def test_token_header(monkeypatch):
    store, seen = _store(monkeypatch, FakeResponse(200, {"a": ["x"]}), token="secret")
    store.load()
    assert seen["headers"]["Authorization"] == "token secret"
    assert seen["headers"]["Accept"] == "application/json"


def test_failed_reload_clears_previous_data(monkeypatch):
    store, _ = _store(monkeypatch, FakeResponse(200, {"a": ["x"]}))
    assert store.load()
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(500, text="oops"))
    assert store.load() is False
    assert store.get("a") is None
