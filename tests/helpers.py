import base64
import json
import os
from typing import Callable, Dict, List

import httpx
from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from ytplay.config.settings import SaveTubeConfig

SECRET_KEY = SaveTubeConfig().secret_key


def encrypt_payload(payload: dict, secret_key: str = SECRET_KEY) -> str:
    """Build an info payload the way the media provider does"""
    iv = os.urandom(16)
    cipher = AES.new(bytes.fromhex(secret_key), AES.MODE_CBC, iv)
    ciphertext = cipher.encrypt(pad(json.dumps(payload).encode("utf-8"), AES.block_size))
    return base64.b64encode(iv + ciphertext).decode("ascii")


class Router:
    """Route table for httpx.MockTransport keyed by host and path"""

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[httpx.Request] = []

    def add(self, host: str, path: str, handler) -> None:
        if not callable(handler):
            body = handler
            handler = lambda request: httpx.Response(200, json=body)
        self.routes[f"{host}{path}"] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get(f"{request.url.host}{request.url.path}")
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.calls]


