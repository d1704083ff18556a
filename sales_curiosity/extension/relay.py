"""
Message Relay - performs HTTP calls on behalf of the popup.

Only the relay talks to the network. It handles one message type:

    {"type": "PING_API", "url", "method", "body"?, "authToken"?}
        -> {"ok": true, "status", "data"} | {"ok": false, "error"}

`ok` means the request completed; a 4xx/5xx answer is still ok=True and the
caller reads `status` and `data`. No validation, retries or timeout.
"""

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from ..config import EXTENSION_ORIGIN

PING_API = "PING_API"


class RelayResponse(BaseModel):
    """Result of one relayed request, tagged by `ok`."""
    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None


class MessageRelay:
    def __init__(self, origin: str = EXTENSION_ORIGIN, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.origin = origin
        self._transport = transport

    async def on_message(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Entry point for runtime messages; unknown types get no response."""
        if not isinstance(message, dict) or message.get("type") != PING_API:
            return None
        response = await self.ping_api(
            message.get("url", ""),
            method=message.get("method") or "GET",
            body=message.get("body"),
            auth_token=message.get("authToken"),
        )
        return response.model_dump(exclude_none=True)

    async def ping_api(
        self,
        url: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None,
    ) -> RelayResponse:
        headers = {"Content-Type": "application/json", "Origin": self.origin}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.request(method.upper(), url, headers=headers, json=body)

            try:
                data = response.json()
            except ValueError:
                data = {}

            return RelayResponse(ok=True, status=response.status_code, data=data)

        except Exception as e:
            print(f"[Relay] {method.upper()} {url} failed: {e!r}")
            return RelayResponse(ok=False, error=str(e) or e.__class__.__name__)
