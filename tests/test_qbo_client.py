from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from qbo_resources.client import QBOAuthTokens, QBOClient
from qbo_resources.faults import QBOFault


class _FakeResp:
    def __init__(self, status_code: int, payload: dict, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        return self._payload


@pytest.fixture
def client(tmp_path) -> QBOClient:
    tokens_path = tmp_path / "tokens.json"
    tokens_path.write_text(
        json.dumps(
            {
                "environment": "sandbox",
                "realm_id": "123",
                "access_token": "ok",
                "refresh_token": "refresh",
                "id_token": None,
            }
        )
    )
    return QBOClient(
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost",
        environment="sandbox",
        tokens_path=str(tokens_path),
    )


def test_find_by_id_refreshes_on_401(monkeypatch, client: QBOClient) -> None:
    calls = {"n": 0}
    seen = SimpleNamespace(auth=[])

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        calls["n"] += 1
        seen.auth.append(headers["Authorization"])
        if calls["n"] == 1:
            return _FakeResp(401, {"Fault": "invalid"}, text="invalid_token")
        return _FakeResp(200, {"Class": {"Id": "5", "Name": "Retail"}, "time": "now"})

    monkeypatch.setattr("requests.request", fake_request)

    def fake_refresh_tokens(tokens: QBOAuthTokens) -> QBOAuthTokens:
        return QBOAuthTokens(
            environment=tokens.environment,
            realm_id=tokens.realm_id,
            access_token="fresh",
            refresh_token=tokens.refresh_token,
            id_token=tokens.id_token,
        )

    monkeypatch.setattr(client, "refresh_tokens", fake_refresh_tokens)

    entity = client.find_by_id("Class", 5)
    assert entity == {"Id": "5", "Name": "Retail"}
    assert calls["n"] == 2
    assert seen.auth == ["Bearer ok", "Bearer fresh"]


def test_add_posts_json_body(monkeypatch, client: QBOClient) -> None:
    seen = SimpleNamespace(method=None, url=None, body=None)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        seen.method, seen.url, seen.body = method, url, json
        return _FakeResp(200, {"Class": {"Id": "9", "Name": "Retail"}})

    monkeypatch.setattr("requests.request", fake_request)

    created = client.add("Class", {"Name": "Retail"})
    assert created["Id"] == "9"
    assert seen.method == "POST"
    assert seen.url == "https://sandbox-quickbooks.api.intuit.com/v3/company/123/class"
    assert seen.body == {"Name": "Retail"}


def test_delete_uses_operation_param(monkeypatch, client: QBOClient) -> None:
    seen = SimpleNamespace(params=None, body=None)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        seen.params, seen.body = params, json
        return _FakeResp(200, {"JournalEntry": {"Id": "4", "status": "Deleted"}})

    monkeypatch.setattr("requests.request", fake_request)

    client.delete("JournalEntry", {"Id": "4", "SyncToken": "2", "Line": []})
    assert seen.params == {"operation": "delete"}
    assert seen.body == {"Id": "4", "SyncToken": "2"}


def test_fault_is_raised_with_status_and_body(monkeypatch, client: QBOClient) -> None:
    body = '<IntuitResponse><Fault><Error><Message>Bad</Message></Error></Fault></IntuitResponse>'

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        return _FakeResp(400, {}, text=body)

    monkeypatch.setattr("requests.request", fake_request)

    with pytest.raises(QBOFault) as excinfo:
        client.update("Class", {"Id": "1", "SyncToken": "0", "sparse": True})
    assert excinfo.value.http_status_code == 400
    assert excinfo.value.response_body == body


def test_query_entities_appends_paging(monkeypatch, client: QBOClient) -> None:
    seen = SimpleNamespace(url=None, params=None)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        seen.url = url
        seen.params = params
        return _FakeResp(200, {"QueryResponse": {"Class": [{"Id": "1"}, {"Id": "2"}]}})

    monkeypatch.setattr("requests.request", fake_request)

    rows = client.query_entities("SELECT * FROM Class", "Class", 1, 10)
    assert rows == [{"Id": "1"}, {"Id": "2"}]
    assert seen.url is not None and seen.url.endswith("/v3/company/123/query")
    assert seen.params == {"query": "SELECT * FROM Class STARTPOSITION 1 MAXRESULTS 10"}


def test_query_entities_normalizes_shapes(monkeypatch, client: QBOClient) -> None:
    payloads = iter(
        [
            {"QueryResponse": {}},
            {"QueryResponse": {"Class": {"Id": "1"}}},
        ]
    )

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        return _FakeResp(200, next(payloads))

    monkeypatch.setattr("requests.request", fake_request)

    assert client.query_entities("SELECT * FROM Class", "Class") == []
    assert client.query_entities("SELECT * FROM Class", "Class") == [{"Id": "1"}]


def test_minorversion_is_sent(monkeypatch, client: QBOClient) -> None:
    client._minorversion = "65"
    seen = SimpleNamespace(params=None)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        seen.params = params
        return _FakeResp(200, {"Class": {"Id": "1"}})

    monkeypatch.setattr("requests.request", fake_request)

    client.find_by_id("Class", "1")
    assert seen.params == {"minorversion": "65"}


def test_from_env_requires_credentials(monkeypatch) -> None:
    monkeypatch.setattr("qbo_resources.client.load_dotenv", lambda **_: False)
    monkeypatch.delenv("QBO_CLIENT_ID", raising=False)
    monkeypatch.delenv("QBO_CLIENT_SECRET", raising=False)

    with pytest.raises(ValueError):
        QBOClient.from_env()


def test_from_env_reads_settings(monkeypatch, qbo_env_vars, tmp_path) -> None:
    monkeypatch.setattr("qbo_resources.client.load_dotenv", lambda **_: False)
    for key, value in qbo_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("QBO_TOKENS_PATH", str(tmp_path / "t.json"))

    client = QBOClient.from_env()
    assert client._timeout_seconds == 5
    assert client._minorversion == "65"
    assert client._tokens_path == str(tmp_path / "t.json")


def test_load_tokens_missing_file(tmp_path) -> None:
    client = QBOClient(
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost",
        environment="sandbox",
        tokens_path=str(tmp_path / "missing.json"),
    )
    with pytest.raises(FileNotFoundError):
        client.load_tokens()


def test_connection_from_env_wraps_client(monkeypatch, qbo_env_vars) -> None:
    from qbo_resources.connection import QBOConnection

    monkeypatch.setattr("qbo_resources.client.load_dotenv", lambda **_: False)
    for key, value in qbo_env_vars.items():
        monkeypatch.setenv(key, value)

    connection = QBOConnection.from_env()
    assert isinstance(connection.get_client(), QBOClient)


def test_find_by_id_quotes_the_id_segment(monkeypatch, client: QBOClient) -> None:
    seen = SimpleNamespace(url=None)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        seen.url = url
        return _FakeResp(200, {"Customer": {"Id": "5"}})

    monkeypatch.setattr("requests.request", fake_request)

    entity = client.find_by_id("Class", "../customer/5?x=1")
    assert seen.url == (
        "https://sandbox-quickbooks.api.intuit.com/v3/company/123/class/..%2Fcustomer%2F5%3Fx%3D1"
    )
    assert entity == {}


def test_response_without_entity_envelope_is_empty(monkeypatch, client: QBOClient) -> None:
    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        return _FakeResp(200, {"Customer": {"Id": "9"}, "time": "now"})

    monkeypatch.setattr("requests.request", fake_request)

    assert client.add("Class", {"Name": "Retail"}) == {}


def test_class_adapter_does_not_accept_other_entity(monkeypatch, client: QBOClient) -> None:
    from qbo_resources import QBOConnection, QuickBooksClass

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        return _FakeResp(200, {"Customer": {"Id": "5"}})

    monkeypatch.setattr("requests.request", fake_request)

    classes = QuickBooksClass(QBOConnection(client))
    assert classes.find("../customer/5?x=1") is None


def test_requests_are_logged_at_debug(monkeypatch, caplog, client: QBOClient) -> None:
    monkeypatch.delenv("QBO_DEBUG", raising=False)

    def fake_request(method, url, headers=None, params=None, json=None, timeout=None):
        return _FakeResp(200, {"Class": {"Id": "1"}})

    monkeypatch.setattr("requests.request", fake_request)

    with caplog.at_level("DEBUG", logger="qbo_resources.client"):
        client.find_by_id("Class", "1")

    messages = [r.getMessage() for r in caplog.records if r.name == "qbo_resources.client"]
    assert messages == [
        "GET https://sandbox-quickbooks.api.intuit.com/v3/company/123/class/1 params=None -> 200"
    ]
    assert "QBO_DEBUG" not in messages[0]
    assert "Bearer" not in messages[0]
