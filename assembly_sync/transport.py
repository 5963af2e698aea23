"""Thin JSON-over-HTTP helpers around ``requests``."""
from __future__ import annotations

import json
import logging
import urllib.parse
from typing import Any, Dict, Iterable, List, Optional

import requests

from .constants import HTTP_METHODS
from .errors import PayloadDecodeError, RemoteServiceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def build_headers(token: Optional[str] = None) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def add_query_parameters(
    base_url: str, name: Optional[str], values: Optional[Iterable[str]]
) -> str:
    """Append URL-encoded ``values`` as query parameters.

    Each value is emitted as ``name=value``; with an empty ``name`` the bare
    value is used."""
    encoded: List[str] = []
    for value in values or []:
        token = urllib.parse.quote_plus(str(value))
        if name:
            token = f"{urllib.parse.quote_plus(name)}={token}"
        encoded.append(token)
    if not encoded:
        return base_url
    return f"{base_url}?{'&'.join(encoded)}"


def request(
    session: requests.Session,
    url: str,
    method: str,
    token: Optional[str] = None,
    body: Any = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Send a JSON request and return the response text.

    204 yields an empty string, any other 2xx the body text. Everything else
    raises ``RemoteServiceError``; connection failures raised by ``requests``
    propagate unchanged."""
    method = method.upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    data = json.dumps(body) if body is not None else None
    logger.debug("%s %s", method, url)
    response = session.request(
        method, url, headers=build_headers(token), data=data, timeout=timeout
    )
    status = response.status_code
    if status == 204:
        return ""
    if 200 <= status < 300:
        return response.text
    raise RemoteServiceError(status, response.text)


def _decode(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadDecodeError(f"Invalid JSON payload: {exc}") from exc


def decode_object(text: str) -> Dict[str, Any]:
    payload = _decode(text)
    if not isinstance(payload, dict):
        raise PayloadDecodeError("The provided string is not a valid JSON object.")
    return payload


def decode_array(text: str) -> List[Any]:
    payload = _decode(text)
    if not isinstance(payload, list):
        raise PayloadDecodeError("The provided string is not a valid JSON array.")
    return payload
