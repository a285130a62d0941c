from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from event_planner.core.errors import InvalidArgument


@dataclass(frozen=True)
class Attachment:
    """Opaque handle to a file picked by the user (image, video, document)."""

    name: str
    content_type: str = "application/octet-stream"
    path: str | None = None
    data: bytes | None = None
    size: int = 0

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path:
            return Path(self.path).read_bytes()
        return b""

    def to_dict(self) -> dict:
        return {"name": self.name, "content_type": self.content_type, "path": self.path, "size": self.size}

    @classmethod
    def from_path(cls, path: str | Path, content_type: str = "application/octet-stream") -> "Attachment":
        p = Path(path)
        return cls(name=p.name, content_type=content_type, path=str(p), size=p.stat().st_size)


class WizardRecord:
    """
    Form data shared by all steps of a wizard.

    Scalar fields and file attachments are kept apart so drafts and
    submissions can treat binaries differently; the set of attachment
    fields is fixed when the record is created.
    """

    def __init__(
        self,
        fields: Mapping[str, Any] | None = None,
        attachment_fields: Iterable[str] = (),
    ) -> None:
        self.fields: Dict[str, Any] = copy.deepcopy(dict(fields or {}))
        self.attachments: Dict[str, List[Attachment]] = {name: [] for name in attachment_fields}

    def __contains__(self, key: str) -> bool:
        return key in self.fields or key in self.attachments

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WizardRecord):
            return NotImplemented
        return self.fields == other.fields and self.attachments == other.attachments

    def __repr__(self) -> str:
        counts = {k: len(v) for k, v in self.attachments.items()}
        return f"WizardRecord(fields={self.fields!r}, attachments={counts!r})"

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.attachments:
            return list(self.attachments[key])
        return self.fields.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key in self.attachments:
            if not all(isinstance(v, Attachment) for v in value or []):
                raise InvalidArgument(f"Field {key} only accepts attachments")
            self.attachments[key] = list(value or [])
        else:
            self.fields[key] = value

    def add_attachment(self, key: str, attachment: Attachment) -> None:
        if key not in self.attachments:
            raise InvalidArgument(f"{key} is not an attachment field")
        self.attachments[key].append(attachment)

    def remove_attachment(self, key: str, index: int) -> None:
        if key not in self.attachments:
            raise InvalidArgument(f"{key} is not an attachment field")
        items = self.attachments[key]
        if 0 <= index < len(items):
            items.pop(index)

    def copy(self) -> "WizardRecord":
        clone = WizardRecord(self.fields, self.attachments.keys())
        clone.attachments = {k: list(v) for k, v in self.attachments.items()}
        return clone

    def to_dict(self) -> dict:
        return {
            "fields": copy.deepcopy(self.fields),
            "attachments": {k: [a.to_dict() for a in v] for k, v in self.attachments.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WizardRecord":
        """Rebuild a record from `to_dict` output; raises ValueError when the shape is wrong."""
        fields = data.get("fields") or {}
        attachments = data.get("attachments") or {}
        if not isinstance(fields, Mapping) or not isinstance(attachments, Mapping):
            raise ValueError("fields and attachments must be objects")
        record = cls(fields, attachments.keys())
        for key, items in attachments.items():
            if not isinstance(items, list):
                raise ValueError(f"attachments.{key} must be a list")
            for item in items:
                if not isinstance(item, Mapping):
                    raise ValueError(f"attachments.{key} holds {type(item).__name__}, expected an object")
                record.add_attachment(
                    key,
                    Attachment(
                        name=str(item.get("name") or ""),
                        content_type=str(item.get("content_type") or "application/octet-stream"),
                        path=item.get("path"),
                        size=int(item.get("size") or 0),
                    ),
                )
        return record
