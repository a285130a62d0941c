from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from event_planner.core.errors import CollaboratorError
from event_planner.core.models.wizard import WizardRecord

logger = logging.getLogger(__name__)


class DraftStore(Protocol):
    def save_draft(self, record: WizardRecord) -> None: ...

    def load_draft(self) -> WizardRecord | None: ...


class JsonDraftStore:
    """
    One JSON file per wizard under the drafts directory.

    Attachments are stored as metadata (name, type, size, path) only.
    """

    def __init__(self, directory: str | Path, wizard_name: str):
        self.path = Path(directory) / f"{wizard_name}.json"

    def save_draft(self, record: WizardRecord) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save draft %s: %s", self.path, exc)
            raise CollaboratorError("drafts", str(exc), "storage") from exc
        logger.info("Draft saved to %s", self.path)

    def load_draft(self) -> WizardRecord | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable draft %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring draft %s: expected an object, got %s", self.path, type(data).__name__)
            return None
        try:
            return WizardRecord.from_dict(data)
        except (TypeError, AttributeError, ValueError) as exc:
            logger.warning("Ignoring malformed draft %s: %s", self.path, exc)
            return None

    def discard(self) -> None:
        if self.path.exists():
            self.path.unlink()
