"""
Request/response access for the two supported platforms.

Interceptors and the exception filter talk to an `HttpAdapter` instead of
branching on `CommonConfigOptions.platform` themselves:

| capability             | StarletteAdapter                    | AsgiAdapter                            |
| ---------------------- | ----------------------------------- | -------------------------------------- |
| get_request()          | starlette Request                   | raw ASGI scope (dict)                  |
| method / url           | Request.method / Request.url        | scope["method"] / path + query_string  |
| send(body)             | JSONResponse (jsonable_encoder)     | Response with json.dumps bytes         |
| needs_body_parsing()   | POST body not JSON and not multipart| POST body sent as text/plain           |
| translate_exception()  | the exception itself (re-raise)     | HTTPException(400, original payload)   |
"""

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from crudcore.config.settings import Platform
from crudcore.exceptions.base import exception_payload

JSON_MEDIA_TYPE = "application/json"


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE or media_type.endswith("+json")


class HttpAdapter(ABC):
    """
    Per-request view over the active platform's request and response shape.

    Args:
        request: the incoming Starlette request (the raw scope is reached through it).
        status_code: status the response will carry unless changed with set_status().
    """

    platform: ClassVar[Platform]

    def __init__(self, request: Request, status_code: int = status.HTTP_200_OK):
        self.request = request
        self._status = status_code

    # ------------------------
    # Request side
    # ------------------------

    @abstractmethod
    def get_request(self) -> Any: ...

    @property
    @abstractmethod
    def method(self) -> str: ...

    @property
    @abstractmethod
    def url(self) -> str: ...

    @property
    def content_type(self) -> str:
        return self.request.headers.get("content-type", "")

    def is_multipart(self) -> bool:
        return "multipart/form-data" in self.content_type.lower()

    @abstractmethod
    def needs_body_parsing(self) -> bool:
        """True when the framework would not parse this POST body as JSON on its own."""

    async def read_body(self) -> bytes:
        return await self.request.body()

    def replace_body(self, body: bytes, content_type: str = JSON_MEDIA_TYPE) -> Request:
        """
        Rebuild the request so downstream parsing sees `body` with `content_type`.

        Returns the new request (also stored on the adapter).
        """
        headers = [
            (name, value)
            for name, value in self.request.scope.get("headers", [])
            if name.lower() not in (b"content-type", b"content-length")
        ]
        headers.append((b"content-type", content_type.encode("latin-1")))
        headers.append((b"content-length", str(len(body)).encode("latin-1")))
        scope = {**self.request.scope, "headers": headers}

        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        self.request = Request(scope, receive)
        return self.request

    # ------------------------
    # Response side
    # ------------------------

    @property
    def status(self) -> int:
        return self._status

    def set_status(self, status_code: int) -> "HttpAdapter":
        self._status = status_code
        return self

    @abstractmethod
    def send(self, body: Any) -> Response: ...

    @abstractmethod
    def translate_exception(self, exc: Exception) -> Exception:
        """Exception to raise after an interceptor has logged `exc`."""


class StarletteAdapter(HttpAdapter):
    platform = Platform.STARLETTE

    def get_request(self) -> Request:
        return self.request

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> str:
        url = self.request.url
        return f"{url.path}?{url.query}" if url.query else url.path

    def needs_body_parsing(self) -> bool:
        if self.method.upper() != "POST" or self.is_multipart():
            return False
        return not _is_json_content_type(self.content_type)

    def send(self, body: Any) -> Response:
        return JSONResponse(content=jsonable_encoder(body), status_code=self.status)

    def translate_exception(self, exc: Exception) -> Exception:
        return exc


class AsgiAdapter(HttpAdapter):
    platform = Platform.ASGI

    def get_request(self) -> dict[str, Any]:
        return self.request.scope

    @property
    def method(self) -> str:
        return self.get_request()["method"]

    @property
    def url(self) -> str:
        scope = self.get_request()
        query = scope.get("query_string", b"").decode("latin-1")
        return f"{scope['path']}?{query}" if query else scope["path"]

    @property
    def content_type(self) -> str:
        for name, value in self.get_request().get("headers", []):
            if name.lower() == b"content-type":
                return value.decode("latin-1")
        return ""

    def needs_body_parsing(self) -> bool:
        if self.method.upper() != "POST" or self.is_multipart():
            return False
        return self.content_type.split(";", 1)[0].strip().lower() == "text/plain"

    def send(self, body: Any) -> Response:
        content = json.dumps(body, ensure_ascii=False, default=str).encode("utf-8")
        return Response(content=content, status_code=self.status, media_type=JSON_MEDIA_TYPE)

    def translate_exception(self, exc: Exception) -> Exception:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exception_payload(exc))


_ADAPTERS: dict[Platform, type[HttpAdapter]] = {
    Platform.STARLETTE: StarletteAdapter,
    Platform.ASGI: AsgiAdapter,
}


def create_adapter(platform: Platform, request: Request, status_code: int = status.HTTP_200_OK) -> HttpAdapter:
    try:
        adapter_cls = _ADAPTERS[Platform(platform)]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unsupported platform: {platform!r}") from exc
    return adapter_cls(request, status_code)
