from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence

from event_planner.core.errors import CollaboratorError, InvalidArgument, ValidationError
from event_planner.core.models.wizard import Attachment, WizardRecord
from event_planner.core.services.drafts import DraftStore
from event_planner.core.services.submission import SubmissionResult, SubmissionSink
from event_planner.core.wizard.rules import Validator, no_rules

logger = logging.getLogger(__name__)

SUBMIT_ERROR_KEY = "submit"


@dataclass(frozen=True)
class WizardStep:
    number: int
    title: str
    validator: Validator = no_rules
    description: str = ""
    fields: tuple[str, ...] = ()
    # category picker fields mapped to the field holding their parent category (None for top level)
    category_fields: Mapping[str, str | None] = field(default_factory=dict)


class WizardEngine:
    """
    Generic multi-step form controller.

    `next()` only moves on when the current step validates; `previous()` and
    `go_to()` never validate (step indicators let users jump freely).
    Domain rules live entirely in the step validators.
    """

    def __init__(
        self,
        name: str,
        steps: Sequence[WizardStep],
        initial: Callable[[], WizardRecord],
        sink: SubmissionSink | None = None,
        drafts: DraftStore | None = None,
    ) -> None:
        if not steps:
            raise InvalidArgument("A wizard needs at least one step")
        numbers = [s.number for s in steps]
        if numbers != list(range(1, len(steps) + 1)):
            raise InvalidArgument(f"Steps must be numbered 1..N in order, got {numbers}")
        self.name = name
        self.steps: List[WizardStep] = list(steps)
        self._initial = initial
        self.sink = sink
        self.drafts = drafts
        self.record = initial()
        self.current_step = 1
        self.errors: Dict[str, str] = {}
        self.is_submitting = False
        self._listeners: List[Callable[[], None]] = []

    # -------- Listeners --------
    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # -------- Step info --------
    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def step(self) -> WizardStep:
        return self.steps[self.current_step - 1]

    @property
    def is_first(self) -> bool:
        return self.current_step == 1

    @property
    def is_last(self) -> bool:
        return self.current_step == self.total_steps

    @property
    def progress(self) -> float:
        return self.current_step / self.total_steps

    # -------- Validation --------
    def validate_step(self, number: int | None = None) -> Dict[str, str]:
        step = self.steps[(number or self.current_step) - 1]
        return dict(step.validator(self.record))

    def require_valid(self) -> None:
        errors = self.validate_step()
        if errors:
            raise ValidationError(errors, self.current_step)

    # -------- Navigation --------
    def next(self) -> bool:
        errors = self.validate_step()
        if errors:
            self.errors = errors
            logger.info("%s: step %s blocked by %s", self.name, self.current_step, sorted(errors))
            self._notify()
            return False
        self.errors = {}
        self.current_step = min(self.current_step + 1, self.total_steps)
        self._notify()
        return True

    def previous(self) -> None:
        self.current_step = max(self.current_step - 1, 1)
        self._notify()

    def go_to(self, number: int) -> bool:
        if not 1 <= number <= self.total_steps:
            return False
        self.current_step = number
        self._notify()
        return True

    # -------- Data --------
    def update_field(self, key: str, value: Any) -> None:
        changed = self.record.get(key) != value
        self.record.set(key, value)
        self.errors.pop(key, None)
        if changed:
            # subcategory must belong to the chosen category
            for child, parent in self.step.category_fields.items():
                if parent == key:
                    self.record.set(child, "")
        self._notify()

    def add_attachment(self, key: str, attachment: Attachment) -> None:
        self.record.add_attachment(key, attachment)
        self.errors.pop(key, None)
        self._notify()

    def remove_attachment(self, key: str, index: int) -> None:
        self.record.remove_attachment(key, index)
        self._notify()

    def reset(self) -> None:
        self.record = self._initial()
        self.current_step = 1
        self.errors = {}
        self._notify()

    # -------- Collaborators --------
    def submit(self) -> SubmissionResult:
        """Validate the current step and hand the whole record to the sink; step is not changed."""
        if self.sink is None:
            raise InvalidArgument(f"{self.name}: no submission sink configured")
        errors = self.validate_step()
        if errors:
            self.errors = errors
            self._notify()
            return SubmissionResult(success=False, message="Please fix the highlighted fields")

        self.is_submitting = True
        self._notify()
        try:
            result = self.sink.submit(self.record.copy())
        except CollaboratorError as exc:
            result = SubmissionResult(success=False, message=exc.message or str(exc))
        except Exception as exc:
            logger.exception("%s: submission sink crashed", self.name)
            result = SubmissionResult(success=False, message=str(exc))
        finally:
            self.is_submitting = False

        if result.success:
            self.errors.pop(SUBMIT_ERROR_KEY, None)
            logger.info("%s: submitted (id=%s)", self.name, result.id)
        else:
            self.errors[SUBMIT_ERROR_KEY] = result.message or "Submission failed. Please try again."
            logger.warning("%s: submission failed: %s", self.name, result.message)
        self._notify()
        return result

    def save_draft(self) -> bool:
        """Persist the record as-is; drafts are never validated."""
        if self.drafts is None:
            raise InvalidArgument(f"{self.name}: no draft store configured")
        try:
            self.drafts.save_draft(self.record.copy())
        except CollaboratorError as exc:
            message = exc.message or str(exc)
        except Exception as exc:
            logger.exception("%s: draft store crashed while saving", self.name)
            message = str(exc)
        else:
            self.errors.pop(SUBMIT_ERROR_KEY, None)
            self._notify()
            return True
        self.errors[SUBMIT_ERROR_KEY] = f"Could not save draft: {message}"
        self._notify()
        return False

    def load_draft(self) -> bool:
        if self.drafts is None:
            return False
        try:
            draft = self.drafts.load_draft()
        except CollaboratorError as exc:
            logger.warning("%s: could not load draft: %s", self.name, exc)
            return False
        except Exception:
            logger.exception("%s: draft store crashed while loading", self.name)
            return False
        if draft is None:
            return False
        # Keys missing from an older draft keep their defaults.
        record = self._initial()
        for key, value in draft.fields.items():
            try:
                record.set(key, value)
            except InvalidArgument as exc:
                logger.warning("%s: skipping draft field %s: %s", self.name, key, exc)
        for key, attachments in draft.attachments.items():
            if key in record.attachments:
                record.attachments[key] = list(attachments)
        self.record = record
        self.errors = {}
        self._notify()
        return True
