from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx


@dataclass
class ApiConfig:
    base_url: str
    token: Optional[str] = None
    timeout: float = 10.0


class ApiConnection:
    """Singleton-like HTTP client factory.

    Note: We open a short-lived client per operation, so every call runs on
    whichever event loop is current (Flask async views get a fresh one).
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config
        self._transport = transport

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    def connect(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=headers,
            timeout=self._config.timeout,
            transport=self._transport,
        )
