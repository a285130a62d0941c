from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

import requests

from event_planner.core.errors import CollaboratorError
from event_planner.core.models.wizard import WizardRecord
from event_planner.core.services.http import DEFAULT_TIMEOUT, build_session, extract_message

logger = logging.getLogger(__name__)

FileField = Tuple[str, Tuple[str, bytes, str]]


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    id: str | None = None
    message: str = ""


class SubmissionSink(Protocol):
    def submit(self, record: WizardRecord) -> SubmissionResult: ...


def _form_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def serialize_record(record: WizardRecord) -> Tuple[Dict[str, str], List[FileField]]:
    """
    Split the record into multipart form fields and file parts.

    Scalars become strings, lists and dicts become JSON strings, and every
    attachment becomes one file part under its field name.
    """
    data = {key: _form_value(value) for key, value in record.fields.items()}
    files: List[FileField] = []
    for key, attachments in record.attachments.items():
        for attachment in attachments:
            files.append((key, (attachment.name, attachment.read(), attachment.content_type)))
    return data, files


class HttpSubmissionSink:
    """
    Posts a finished wizard record to the marketplace API.

    Multipart by default (files included); `json_body=True` sends the scalar
    fields as a JSON document instead, for endpoints that take no files.
    """

    def __init__(
        self,
        base_url: str,
        path: str,
        session: requests.Session | None = None,
        json_body: bool = False,
        extra_fields: Dict[str, Any] | None = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ):
        self.url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        self.session = session or build_session(retries=0)
        self.json_body = json_body
        self.extra_fields = dict(extra_fields or {})
        self.timeout = timeout

    def submit(self, record: WizardRecord) -> SubmissionResult:
        try:
            if self.json_body:
                payload = {**record.fields, **self.extra_fields}
                response = self.session.post(self.url, json=payload, timeout=self.timeout)
            else:
                data, files = serialize_record(record)
                data.update({k: _form_value(v) for k, v in self.extra_fields.items()})
                response = self.session.post(self.url, data=data, files=files or None, timeout=self.timeout)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as exc:
            logger.error("POST %s network error: %s", self.url, exc)
            raise CollaboratorError("submission", f"Network error: {exc}", "network") from exc
        except requests.exceptions.RequestException as exc:
            logger.error("POST %s failed: %s", self.url, exc)
            raise CollaboratorError("submission", str(exc), "network") from exc
        except OSError as exc:
            logger.error("Could not read attachment for %s: %s", self.url, exc)
            raise CollaboratorError("submission", f"Could not read attachment: {exc}", "storage") from exc

        if not response.ok:
            message = extract_message(response) or "Submission failed"
            logger.warning("POST %s rejected with %s: %s", self.url, response.status_code, message)
            return SubmissionResult(success=False, message=message)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict) and body.get("success") is False:
            return SubmissionResult(success=False, message=str(body.get("message") or body.get("error") or "Submission failed"))

        created = None
        if isinstance(body, dict):
            data = body.get("data") if isinstance(body.get("data"), dict) else body
            created = data.get("id")
        logger.info("POST %s succeeded (id=%s)", self.url, created)
        return SubmissionResult(success=True, id=str(created) if created is not None else None)
