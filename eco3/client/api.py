"""
Thin async client for the eco3 REST API.

Every method makes exactly one request. Non-2xx responses raise
``httpx.HTTPStatusError``; transport problems raise other ``httpx.HTTPError``
subclasses. Callers decide what a failure means.
"""
import os
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:3000"


def default_base_url() -> str:
    return os.environ.get("ECO3_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


class ApiClient:
    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.base_url = (base_url or default_base_url()).rstrip("/")
        self._owns_client = client is None
        self.http = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _auth(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self.http.request(method, self.url(path), **kwargs)
        response.raise_for_status()
        return response

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        response = await self._request("POST", "/api/auth/login", json={"email": email, "password_hash": password})
        return response.json()

    async def register(self, username: str, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        body = {"username": username, "email": email, "password_hash": password}
        if full_name:
            body["full_name"] = full_name
        response = await self._request("POST", "/api/auth/register", json=body)
        return response.json()

    async def verify(self, token: str) -> Dict[str, Any]:
        response = await self._request("GET", "/api/auth/verify", headers=self._auth(token))
        return response.json()

    async def update_user(self, token: str, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("PUT", f"/api/users/{user_id}", json=fields, headers=self._auth(token))
        return response.json()

    async def delete_user(self, token: str, user_id: str) -> None:
        await self._request("DELETE", f"/api/users/{user_id}", headers=self._auth(token))

    async def notifications(self, token: str) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/api/notifications", headers=self._auth(token))
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()
