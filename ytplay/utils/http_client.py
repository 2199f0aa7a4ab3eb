from typing import Any, Dict, Optional

import httpx

from ytplay.core.exceptions import UpstreamInvalidResponse, UpstreamRequestError


class JsonHttpClient:
    """
    Thin wrapper around httpx for JSON upstream APIs.
    Transport failures and non-object bodies become upstream errors.
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "JsonHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, payload: Dict[str, str]) -> Dict[str, Any]:
        return await self.request("POST", url, json=payload)

    async def request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamRequestError(f"{method} {url} failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamInvalidResponse(
                f"{method} {url} returned non-JSON body (HTTP {resp.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise UpstreamInvalidResponse(f"{method} {url} returned unexpected JSON")
        return data
