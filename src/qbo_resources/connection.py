"""Connection holder passed to every resource adapter."""

from __future__ import annotations

from .client import QBOClient


class QBOConnection:
    """Owns one `QBOClient` for a single caller context.

    Neither the connection nor its client is synchronized. Share one across
    threads only behind your own lock; otherwise create one per thread/request.
    """

    def __init__(self, client: QBOClient) -> None:
        self._client = client

    @classmethod
    def from_env(cls) -> "QBOConnection":
        return cls(QBOClient.from_env())

    def get_client(self) -> QBOClient:
        return self._client
