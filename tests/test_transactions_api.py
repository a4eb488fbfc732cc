"""
Tests for the inbound HTTP surface (validation, error mapping, health).
"""

import json

import httpx
import pytest


def test_get_transactions_defaults(client, upstream):
    upstream.respond({"data": [{"id": "t1", "amount": "12.5", "currency": "USD"}], "total": 1})

    r = client.get("/api/transactions")

    assert r.status_code == 200
    body = r.json()
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}
    assert body["data"][0]["id"] == "t1"
    assert body["data"][0]["amount"] == 12.5
    assert body["data"][0]["sender"] == {"name": "", "account": ""}
    # Upstream-only fields are omitted when not supplied
    assert "lastPage" not in body
    assert "incomingSum" not in body
    assert upstream.last_request.url.params["p"] == "1"


def test_get_transactions_forwards_page_and_limit(client, upstream):
    upstream.respond({"data": [], "total": 55, "lastPage": 3, "perPage": 20, "incomingSum": 10})

    r = client.get("/api/transactions", params={"page": "2", "limit": "20"})

    assert r.status_code == 200
    body = r.json()
    assert body["pagination"] == {"page": 2, "limit": 20, "total": 55, "totalPages": 3}
    assert body["lastPage"] == 3
    assert body["perPage"] == 20
    assert body["incomingSum"] == 10
    assert upstream.last_request.url.params["limit"] == "20"


@pytest.mark.parametrize("page", ["0", "-1", "abc", "1.5", ""])
def test_invalid_page_rejected_before_upstream(client, upstream, page):
    r = client.get("/api/transactions", params={"page": page})

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid page parameter"
    assert upstream.requests == []


@pytest.mark.parametrize("limit", ["0", "101", "many"])
def test_invalid_limit_rejected_before_upstream(client, upstream, limit):
    r = client.get("/api/transactions", params={"limit": limit})

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid limit parameter (1-100)"
    assert upstream.requests == []


def test_limit_bounds_are_inclusive(client, upstream):
    assert client.get("/api/transactions", params={"limit": "1"}).status_code == 200
    assert client.get("/api/transactions", params={"limit": "100"}).status_code == 200


def test_upstream_network_error_maps_to_502(client, upstream):
    upstream.fail_with(httpx.ConnectError("dial tcp 10.0.0.7:443: connection refused"))

    r = client.get("/api/transactions")

    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to fetch transactions from YaYa Wallet API"
    assert "10.0.0.7" not in r.text


def test_upstream_error_body_not_leaked(client, upstream):
    upstream.respond({"message": "Signature mismatch for key test-key"}, status_code=403)

    r = client.post("/api/transactions/search", json={"query": "abebe"})

    assert r.status_code == 502
    assert r.json()["detail"] == "Failed to search transactions from YaYa Wallet API"
    assert "Signature mismatch" not in r.text


def test_search_transactions(client, upstream):
    upstream.respond({"data": [{"id": "s1", "amount": 40}], "total": 1})

    r = client.post("/api/transactions/search", json={"query": "abebe"})

    assert r.status_code == 200
    body = r.json()
    assert body["data"][0]["id"] == "s1"
    assert body["data"][0]["amount_with_currency"] == "40.00 ETB"
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["limit"] == 10
    assert upstream.last_request.content == b'{"query":"abebe"}'


def test_search_page_and_limit_from_body(client, upstream):
    client.post("/api/transactions/search", json={"query": "abebe", "page": 3, "limit": 50})

    params = upstream.last_request.url.params
    assert params["page"] == "3"
    assert params["limit"] == "50"


def test_search_query_params_override_body(client, upstream):
    client.post(
        "/api/transactions/search?page=4&limit=5",
        json={"query": "abebe", "page": 3, "limit": 50},
    )

    params = upstream.last_request.url.params
    assert params["page"] == "4"
    assert params["limit"] == "5"


@pytest.mark.parametrize("payload", [{"query": "  "}, {"query": ""}, {}])
def test_search_requires_query(client, upstream, payload):
    r = client.post("/api/transactions/search", json=payload)

    assert r.status_code == 400
    assert r.json()["detail"] == "Search query is required"
    assert upstream.requests == []


def test_search_validates_limit(client, upstream):
    r = client.post("/api/transactions/search", json={"query": "abebe", "limit": 101})

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid limit parameter (1-100)"
    assert upstream.requests == []


def test_search_validates_page(client, upstream):
    r = client.post("/api/transactions/search?page=0", json={"query": "abebe"})

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid page parameter"


def test_health(client):
    r = client.get("/api/health")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")
    assert "T" in body["timestamp"]


def test_out_of_range_upstream_total_is_absorbed(client, upstream):
    upstream.respond({"data": [], "total": json.loads("1" + "0" * 400)})

    r = client.get("/api/transactions")

    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 0


def test_search_rejects_unencodable_query(client, upstream):
    r = client.post(
        "/api/transactions/search",
        content=b'{"query":"\\ud800"}',
        headers={"Content-Type": "application/json"},
    )

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid search query"
    assert upstream.requests == []


@pytest.mark.parametrize("payload,detail", [
    ({"query": 123}, "Search query is required"),
    ({"query": ["abebe"]}, "Search query is required"),
    ({"query": "abebe", "page": 1.5}, "Invalid page parameter"),
    ({"query": "abebe", "page": True}, "Invalid page parameter"),
    ({"query": "abebe", "limit": "lots"}, "Invalid limit parameter (1-100)"),
])
def test_search_body_type_errors_are_400(client, upstream, payload, detail):
    r = client.post("/api/transactions/search", json=payload)

    assert r.status_code == 400
    assert r.json()["detail"] == detail
    assert upstream.requests == []
