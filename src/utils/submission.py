# src/utils/submission.py
"""
Letter submission: form validation, the upload -> insert pipeline, and the
three-step wizard (compose -> sending -> sent) the write-a-letter view renders.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from utils.errors import InvalidTransition, SubmissionError, ValidationError
from utils.image_utils import resize_image
from utils.letters_repo import Behavior, insert_letter, upload_image
from utils.supabase_utils import DEFAULT_BUCKET, DEFAULT_TABLE

logger = logging.getLogger(__name__)

MIN_SENDING_SECONDS = 2.0


@dataclass(frozen=True)
class LetterDraft:
    """What the form collected. Kept across a failed attempt so the form can be refilled."""
    name: str = ""
    wishlist: str = ""
    behavior: Behavior = Behavior.NICE
    age: str = ""
    email: str = ""
    phone: str = ""
    image: Optional[bytes] = None

    def without_image(self) -> "LetterDraft":
        return replace(self, image=None)


def validate(draft: LetterDraft) -> None:
    if not draft.name.strip() or not draft.wishlist.strip():
        raise ValidationError("Please fill in your name and wishlist!")
    age = draft.age.strip() if isinstance(draft.age, str) else draft.age
    if age not in ("", None):
        try:
            value = int(age)
        except (TypeError, ValueError):
            raise ValidationError("Age should be a number.")
        if not 0 <= value <= 150:
            raise ValidationError("Age should be between 0 and 150.")


def build_row(draft: LetterDraft, image_url: Optional[str]) -> Dict[str, Any]:
    age = draft.age.strip() if isinstance(draft.age, str) else draft.age
    return {
        "name": draft.name.strip(),
        "age": int(age) if age not in ("", None) else None,
        "email": draft.email.strip() or None,
        "phone": draft.phone.strip() or None,
        "behavior": Behavior(draft.behavior).value,
        "wishlist": draft.wishlist.strip(),
        "image_url": image_url,
    }


def submit_letter(
    supabase,
    draft: LetterDraft,
    *,
    table: str = DEFAULT_TABLE,
    bucket: str = DEFAULT_BUCKET,
    min_seconds: float = MIN_SENDING_SECONDS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Upload the optional picture, insert the letter, then hold until the sending
    animation has shown for min_seconds. Returns the submitted name.

    Any failure raises SubmissionError. An already uploaded picture is left in
    the bucket when the insert fails.
    """
    validate(draft)
    started = clock()

    image_url = None
    if draft.image:
        try:
            jpeg = resize_image(draft.image)
            image_url = upload_image(supabase, jpeg, bucket=bucket)
        except Exception as e:
            logger.exception("letter image upload failed")
            raise SubmissionError(stage="upload") from e

    try:
        insert_letter(supabase, build_row(draft, image_url), table=table)
    except Exception as e:
        logger.exception("letter insert failed (image_url=%s)", image_url)
        raise SubmissionError(stage="insert") from e

    remaining = min_seconds - (clock() - started)
    if remaining > 0:
        sleep(remaining)
    logger.info("letter sent for %s", draft.name.strip())
    return draft.name.strip()


# ---------- wizard ----------
class WizardStep(str, enum.Enum):
    COMPOSE = "compose"
    SENDING = "sending"
    SENT = "sent"


class LetterWizard:
    def __init__(self):
        self.step = WizardStep.COMPOSE
        self.draft = LetterDraft()
        self.submitted_name = ""

    def _expect(self, step: WizardStep, action: str) -> None:
        if self.step is not step:
            raise InvalidTransition(f"cannot {action} while {self.step.value}")

    def begin(self, draft: LetterDraft) -> None:
        """compose -> sending. Invalid drafts raise and leave the wizard in compose."""
        self._expect(WizardStep.COMPOSE, "send")
        self.draft = draft
        validate(draft)
        self.step = WizardStep.SENDING

    def succeed(self, name: str) -> None:
        self._expect(WizardStep.SENDING, "finish")
        self.submitted_name = name
        self.step = WizardStep.SENT

    def fail(self) -> None:
        self._expect(WizardStep.SENDING, "fail")
        self.step = WizardStep.COMPOSE

    def reset(self) -> None:
        self._expect(WizardStep.SENT, "reset")
        self.draft = LetterDraft()
        self.submitted_name = ""
        self.step = WizardStep.COMPOSE

    def run(self, supabase, **kwargs) -> str:
        """Drive the sending step through submit_letter; returns the new step."""
        self._expect(WizardStep.SENDING, "run")
        try:
            name = submit_letter(supabase, self.draft, **kwargs)
        except SubmissionError:
            self.fail()
            raise
        self.succeed(name)
        return name
