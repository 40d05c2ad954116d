"""QuickBooks Online (QBO) data client.

Purpose
- Provide the DataService-style verbs (add/update/delete/find_by_id/query)
  that resource adapters delegate to.
- Keep OAuth token handling (load/save/refresh) in one place.

Every non-2xx response is raised as `QBOFault`; callers decide whether that is
an exception or a failure value.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests
from dotenv import dotenv_values, load_dotenv
from intuitlib.client import AuthClient

from .faults import QBOFault

logger = logging.getLogger(__name__)

load_dotenv(override=False)

# Allow local runs with only `.env.example` filled. Its blank placeholders must
# not override real `.env` values.
if not os.environ.get("QBO_CLIENT_ID"):
    example_path = os.path.abspath(".env.example")
    if os.path.exists(example_path):
        for k, v in (dotenv_values(example_path) or {}).items():
            if not k or not v:
                continue
            if not os.environ.get(k):
                os.environ[k] = v


@dataclass(slots=True)
class QBOAuthTokens:
    environment: str
    realm_id: str
    access_token: str
    refresh_token: str
    id_token: str | None = None
    saved_at_unix: int | None = None


class QBOClient:
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        environment: str,
        tokens_path: str,
        timeout_seconds: int = 30,
        minorversion: str | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._environment = environment
        self._tokens_path = tokens_path
        self._timeout_seconds = timeout_seconds
        self._minorversion = minorversion

    @staticmethod
    def _base_url(environment: str) -> str:
        return (
            "https://quickbooks.api.intuit.com"
            if environment == "production"
            else "https://sandbox-quickbooks.api.intuit.com"
        )

    @staticmethod
    def _entity_path(entity: str) -> str:
        # REST paths use the lowercased entity name: "JournalEntry" -> "journalentry"
        return entity.lower()

    @classmethod
    def from_env(cls) -> "QBOClient":
        load_dotenv(override=False)
        client_id = os.environ.get("QBO_CLIENT_ID")
        client_secret = os.environ.get("QBO_CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ValueError("Missing QBO_CLIENT_ID or QBO_CLIENT_SECRET")

        environment = os.environ.get("QBO_ENVIRONMENT", "sandbox")
        redirect_uri = os.environ.get("QBO_REDIRECT_URI", "http://localhost")
        tokens_path = os.environ.get(
            "QBO_TOKENS_PATH", os.path.abspath(".env_qbo_tokens.json")
        )
        timeout_seconds = int(os.environ.get("QBO_HTTP_TIMEOUT_SECONDS", "30"))

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            environment=environment,
            tokens_path=tokens_path,
            timeout_seconds=timeout_seconds,
            minorversion=os.environ.get("QBO_MINORVERSION") or None,
        )

    def load_tokens(self) -> QBOAuthTokens:
        if not os.path.exists(self._tokens_path):
            raise FileNotFoundError(
                f"Token file not found: {self._tokens_path}. "
                "Complete the Intuit OAuth flow and save the tokens there first."
            )
        with open(self._tokens_path, "r", encoding="utf-8") as f:
            raw = json.load(f)

        return QBOAuthTokens(
            environment=raw.get("environment") or self._environment,
            realm_id=raw["realm_id"],
            access_token=raw["access_token"],
            refresh_token=raw["refresh_token"],
            id_token=raw.get("id_token"),
            saved_at_unix=raw.get("saved_at_unix"),
        )

    def save_tokens(self, tokens: QBOAuthTokens) -> None:
        payload: dict[str, Any] = {
            "environment": tokens.environment,
            "realm_id": tokens.realm_id,
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "id_token": tokens.id_token,
            "saved_at_unix": int(time.time()),
        }
        with open(self._tokens_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

    def refresh_tokens(self, tokens: QBOAuthTokens) -> QBOAuthTokens:
        auth = AuthClient(
            client_id=self._client_id,
            client_secret=self._client_secret,
            redirect_uri=self._redirect_uri,
            environment=tokens.environment,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            realm_id=tokens.realm_id,
            id_token=tokens.id_token,
        )
        auth.refresh(refresh_token=auth.refresh_token)

        if not auth.access_token or not auth.refresh_token:
            raise RuntimeError(
                "QBO token refresh failed (missing refreshed access_token/refresh_token)"
            )

        logger.info("Refreshed QBO access token for realm %s", auth.realm_id or tokens.realm_id)
        updated = QBOAuthTokens(
            environment=tokens.environment,
            realm_id=auth.realm_id or tokens.realm_id,
            access_token=auth.access_token,
            refresh_token=auth.refresh_token,
            id_token=auth.id_token,
            saved_at_unix=int(time.time()),
        )
        self.save_tokens(updated)
        return updated

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        bearer_token: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {bearer_token}",
            "Accept": "application/json",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"

        resp = requests.request(
            method,
            url,
            headers=headers,
            params=params,
            json=body,
            timeout=self._timeout_seconds,
        )

        # Only URL/params are logged, never tokens.
        logger.debug("%s %s params=%s -> %s", method, url, params, resp.status_code)

        if resp.status_code >= 400:
            raise QBOFault(resp.status_code, resp.text)
        return resp.json()

    def _call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request to `/v3/company/<realm>/<path>`, refreshing once on 401."""

        tokens = self.load_tokens()
        url = f"{self._base_url(tokens.environment)}/v3/company/{tokens.realm_id}/{path}"

        merged: dict[str, str] = dict(params or {})
        if self._minorversion:
            merged.setdefault("minorversion", self._minorversion)

        try:
            return self._request_json(
                method, url, bearer_token=tokens.access_token, params=merged or None, body=body
            )
        except QBOFault as e:
            # Common case: expired access token
            if e.http_status_code == 401 or "invalid_token" in e.response_body.lower():
                tokens = self.refresh_tokens(tokens)
                return self._request_json(
                    method, url, bearer_token=tokens.access_token, params=merged or None, body=body
                )
            raise

    @staticmethod
    def _unwrap(entity: str, response: dict[str, Any]) -> dict[str, Any]:
        # A response without the `{"<Entity>": {...}}` envelope carries no entity of that type.
        inner = response.get(entity) if isinstance(response, dict) else None
        return inner if isinstance(inner, dict) else {}

    def add(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = self._call("POST", self._entity_path(entity), body=payload)
        return self._unwrap(entity, response)

    def update(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        # QBO updates are a POST of the full (or sparse) object including Id/SyncToken.
        response = self._call("POST", self._entity_path(entity), body=payload)
        return self._unwrap(entity, response)

    def delete(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Delete an entity (transaction types only; list entities reject this)."""

        body = {"Id": payload.get("Id"), "SyncToken": payload.get("SyncToken")}
        response = self._call(
            "POST",
            self._entity_path(entity),
            params={"operation": "delete"},
            body=body,
        )
        return self._unwrap(entity, response)

    def find_by_id(self, entity: str, entity_id: str | int) -> dict[str, Any]:
        id_segment = quote(str(entity_id), safe="")
        response = self._call("GET", f"{self._entity_path(entity)}/{id_segment}")
        return self._unwrap(entity, response)

    def query(self, *, query: str) -> dict[str, Any]:
        """Run a QBO Query API statement and return the raw response."""

        return self._call("GET", "query", params={"query": query})

    def query_entities(
        self,
        query: str,
        entity: str,
        start_position: int | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """Run `query` with optional paging and return the `entity` rows.

        `start_position` is QBO's 1-based STARTPOSITION.
        """

        statement = query.strip()
        if start_position is not None:
            statement += f" STARTPOSITION {int(start_position)}"
        if max_results is not None:
            statement += f" MAXRESULTS {int(max_results)}"

        resp = self.query(query=statement)
        qr = resp.get("QueryResponse") if isinstance(resp, dict) else None
        rows = (qr or {}).get(entity) if isinstance(qr, dict) else None

        if rows is None:
            return []
        if isinstance(rows, list):
            return rows
        if isinstance(rows, dict):
            return [rows]
        return []
