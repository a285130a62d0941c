"""
Shared plumbing for the HTTP collaborators (recommendations, categories, submission).

Sessions retry 429/5xx with exponential backoff; every failure is reported as
a `CollaboratorError` classified as network, validation or server.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from event_planner.core.errors import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (3.0, 30.0)


def build_session(retries: int = 3) -> requests.Session:
    retry_strategy = Retry(
        total=retries,
        backoff_factor=1.0,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def classify_status(status_code: Optional[int]) -> str:
    if status_code is None:
        return "network"
    if 400 <= status_code < 500:
        return "validation"
    return "server"


def extract_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "").strip()[:200] or response.reason or ""
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body.get("detail") or body)
    return str(body)


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    source: str,
    timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """Send a request and decode the JSON body, raising `CollaboratorError` on any failure."""
    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
    except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as exc:
        logger.error("%s %s network error: %s", method, url, exc)
        raise CollaboratorError(source, f"Network error: {exc}", "network") from exc
    except requests.exceptions.RequestException as exc:
        logger.error("%s %s failed: %s", method, url, exc)
        raise CollaboratorError(source, str(exc), "network") from exc

    if not response.ok:
        error_type = classify_status(response.status_code)
        message = extract_message(response)
        logger.error("%s %s failed with status %s (%s): %s", method, url, response.status_code, error_type, message)
        raise CollaboratorError(source, message, error_type, response.status_code)

    try:
        return response.json()
    except ValueError as exc:
        logger.error("%s %s returned invalid JSON: %s", method, url, exc)
        raise CollaboratorError(source, "Invalid JSON response", "server", response.status_code) from exc
