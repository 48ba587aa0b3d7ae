from __future__ import annotations  # Backend JSON request gateway module

import json
import logging
import os
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import httpx

from config import BackendRoute
from session_trainer.errors import ServiceError


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


def post_json(
    path: str,
    payload: Dict[str, Any],
    *,
    route: BackendRoute,
    client: Optional[HttpClient] = None,
) -> Any:  # POST a JSON body to the backend and return the decoded JSON reply
    url = f"{route.base_url}{path}"
    headers = _headers(route)
    preview = _preview(payload)
    logger.info("Backend request start route=%s path=%s preview=%s", route.name, path, preview)
    try:
        response, close_cb = _post(url, payload, headers, route.timeout_s, client)
    except Exception as exc:  # noqa: BLE001
        logger.error("Backend transport failure path=%s: %s", path, exc)
        raise ServiceError(f"backend transport failed: {exc}") from exc
    try:
        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("Backend error status=%s path=%s message=%s", response.status_code, path, message)
            raise ServiceError(message, status_code=response.status_code)
        try:
            data = response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload from backend path=%s: %s", path, exc)
            raise ServiceError("backend payload was not JSON", status_code=response.status_code) from exc
    finally:
        _close_safely(close_cb)
    logger.info("Backend request done route=%s path=%s status=%s", route.name, path, response.status_code)
    return data


def _headers(route: BackendRoute) -> Dict[str, str]:  # Compose request headers with bearer token
    headers = {"Content-Type": "application/json"}
    token = route.api_token
    if not token and route.api_token_env:
        token = os.getenv(route.api_token_env)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    headers.update(route.extra_headers)
    return headers


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _error_message(response: HttpResponse) -> str:  # Prefer the backend's `message` field
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        body = response.json()
    except Exception:  # noqa: BLE001
        return fallback
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            message = "; ".join(str(item) for item in message)
        if isinstance(message, str) and message.strip():
            return message
    return fallback


def _preview(payload: Dict[str, Any]) -> str:  # Build preview string for logging
    text = json.dumps(payload, ensure_ascii=False, default=str)
    if len(text) > 120:
        text = text[:117] + "..."
    return text
