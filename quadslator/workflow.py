#!/usr/bin/env python3
# ABOUTME: Session state and request lifecycle for producing four translations.
# ABOUTME: Mediates between the preset store and the translation client.

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from quadslator.errors import GenerationError, StorageWriteError, ValidationError
from quadslator.generation import TranslationClient
from quadslator.models import SavedContext, TranslationRequest
from quadslator.presets import PresetStore

logger = logging.getLogger(__name__)


class RequestState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Notification:
    """A user-visible message; level is one of info, success, warning, error."""

    level: str
    title: str
    message: str


@dataclass(frozen=True)
class Submission:
    """An issued translation request tagged with its sequence number."""

    sequence: int
    request: TranslationRequest


class WorkflowController:
    """Owns the prompt/context fields, presets and the translation request state.

    A submission moves IDLE -> SUBMITTING -> SUCCEEDED or FAILED and may start
    again from any of those. Every submission gets a sequence number; a result
    that arrives for anything but the latest submission is dropped. Preset
    operations can run at any time and never touch the request state.
    """

    def __init__(self, translation_client: TranslationClient, preset_store: PresetStore):
        self.translation_client = translation_client
        self.preset_store = preset_store

        self.prompt = ""
        self.context = ""
        self.results: List[str] = []
        self.presets: List[SavedContext] = []
        self.state = RequestState.IDLE
        self.in_flight = False
        self.field_errors: Dict[str, str] = {}
        self.notifications: List[Notification] = []
        self._latest_sequence = 0

        self.load_presets()

    def notify(self, level: str, title: str, message: str) -> Notification:
        notification = Notification(level=level, title=title, message=message)
        self.notifications.append(notification)
        return notification

    def drain_notifications(self) -> List[Notification]:
        """Return pending notifications and clear the queue."""
        pending, self.notifications = self.notifications, []
        return pending

    # Request lifecycle

    def validate(self) -> TranslationRequest:
        """Check the form fields and build a request.

        Raises:
            ValidationError: If the prompt is empty
        """
        if not self.prompt.strip():
            raise ValidationError("prompt", "Prompt cannot be empty.")
        return TranslationRequest(prompt=self.prompt, context=self.context)

    def begin_submission(self) -> Optional[Submission]:
        """Validate and enter SUBMITTING.

        Returns:
            The new submission, or None if validation failed (state is unchanged)
        """
        try:
            request = self.validate()
        except ValidationError as e:
            self.field_errors[e.field] = e.message
            return None

        self.field_errors.pop("prompt", None)
        self._latest_sequence += 1
        self.results = []
        self.in_flight = True
        self.state = RequestState.SUBMITTING
        return Submission(sequence=self._latest_sequence, request=request)

    def is_current(self, submission: Submission) -> bool:
        return submission.sequence == self._latest_sequence

    def complete_submission(self, submission: Submission, translations: List[str]) -> bool:
        """Apply a successful response. Returns False if it was stale and dropped."""
        if not self.is_current(submission):
            logger.warning(
                "Discarding stale translation result #%d (latest is #%d)",
                submission.sequence, self._latest_sequence,
            )
            return False
        if self.state is not RequestState.SUBMITTING:
            logger.warning("Ignoring repeated settle of translation #%d", submission.sequence)
            return False

        self.results = list(translations)
        self.in_flight = False
        self.state = RequestState.SUCCEEDED
        return True

    def fail_submission(self, submission: Submission, error: GenerationError) -> bool:
        """Apply a failed response. Returns False if it was stale and dropped."""
        if not self.is_current(submission):
            logger.warning(
                "Discarding stale translation failure #%d: %s", submission.sequence, error
            )
            return False
        if self.state is not RequestState.SUBMITTING:
            logger.warning("Ignoring repeated settle of translation #%d: %s", submission.sequence, error)
            return False

        self.results = []
        self.in_flight = False
        self.state = RequestState.FAILED
        self.notify(
            "error",
            "Translation Error",
            "An error occurred while generating translations. Please try again.",
        )
        return True

    def submit(self) -> RequestState:
        """Run a full submission against the translation client."""
        submission = self.begin_submission()
        if submission is None:
            return self.state

        request = submission.request
        try:
            translations = self.translation_client.translate(
                request.prompt, request.effective_context
            )
        except GenerationError as e:
            self.fail_submission(submission, e)
        else:
            self.complete_submission(submission, translations)
        return self.state

    # Presets

    def load_presets(self) -> List[SavedContext]:
        presets, error = self.preset_store.load()
        self.presets = list(presets)
        if error is not None:
            self.notify("warning", "Error", "Could not load saved contexts.")
        return self.presets

    def _persist(self, presets: List[SavedContext]) -> bool:
        previous = self.presets
        self.presets = presets
        try:
            self.preset_store.save_all(presets)
        except StorageWriteError as e:
            logger.error("Preset write failed: %s", e)
            self.presets = previous
            return False
        return True

    def save_preset(self, name: str) -> bool:
        """Save the current context under a name."""
        if not name.strip():
            self.notify("error", "Error", "Context name cannot be empty.")
            return False
        if not self.context.strip():
            self.notify("error", "Error", "Context field is empty. Nothing to save.")
            return False

        if not self._persist(self.presets + [SavedContext(name=name, value=self.context)]):
            self.notify("error", "Error", "Could not save context.")
            return False

        self.notify("success", "Success", f'Context "{name}" saved.')
        return True

    def delete_preset(self, name: str) -> bool:
        """Remove every preset with exactly this name."""
        remaining = [preset for preset in self.presets if preset.name != name]
        if not self._persist(remaining):
            self.notify("error", "Error", "Could not delete context.")
            return False

        self.notify("info", "Context Deleted", f'Context "{name}" has been removed.')
        return True

    def select_preset(self, name: str) -> bool:
        """Copy the first preset with this name into the context field."""
        for preset in self.presets:
            if preset.name == name:
                self.context = preset.value
                return True
        return False
