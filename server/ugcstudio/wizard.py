"""Four-step client flow: upload, enhance, generate, result.

The browser drives these steps; this module keeps the same rules in one place
so they can be reasoned about and tested without a UI. Progress schedules are
purely cosmetic delays and say nothing about how long the server takes.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class WizardStep(IntEnum):
    UPLOAD = 1
    ENHANCE = 2
    GENERATE = 3
    RESULT = 4


class WizardError(RuntimeError):
    pass


@dataclass(frozen=True)
class ProgressStage:
    name: str
    delay_ms: int


def enhance_progress(upscale_factor: float) -> List[ProgressStage]:
    """Fake stages shown while ``/enhance`` is pending."""
    return [
        ProgressStage("Analyse de l'image...", 1000),
        ProgressStage(f"Upscaling ×{upscale_factor:g}...", 2000),
        ProgressStage("Débruitage...", 1500),
        ProgressStage("Amélioration des couleurs...", 1500),
        ProgressStage("Détection des vêtements...", 2000),
        ProgressStage("Finalisation...", 1000),
    ]


# Generate step: the bar advances by GENERATE_TICK_PERCENT every tick and
# stalls at GENERATE_TICK_CAP until the response arrives, then jumps to 100
# and holds for GENERATE_DONE_HOLD_MS before showing the result.
GENERATE_TICK_MS = 300
GENERATE_TICK_PERCENT = 5
GENERATE_TICK_CAP = 95
GENERATE_DONE_HOLD_MS = 500


def generate_progress(ticks: int) -> int:
    return min(ticks * GENERATE_TICK_PERCENT, GENERATE_TICK_CAP)


@dataclass
class Wizard:
    step: WizardStep = WizardStep.UPLOAD
    uploaded_image: Optional[str] = None
    enhanced_image: Optional[str] = None
    detected_items: List[str] = field(default_factory=list)
    generated_video: Optional[str] = None
    busy: bool = False

    def _expect(self, step: WizardStep) -> None:
        if self.step is not step:
            raise WizardError(f"expected step {step.name}, wizard is at {self.step.name}")

    def upload(self, image: str) -> None:
        self._expect(WizardStep.UPLOAD)
        if not image:
            raise WizardError("an image is required")
        # Same guard as the upload widget: only image/* data URIs are accepted
        if not image.startswith("data:image/"):
            raise WizardError("Veuillez télécharger une image valide")
        self.uploaded_image = image
        self.step = WizardStep.ENHANCE

    def enhanced(self, image: str, items: List[str]) -> None:
        self._expect(WizardStep.ENHANCE)
        self.enhanced_image = image
        self.detected_items = list(items)
        self.step = WizardStep.GENERATE

    def generated(self, video_url: str) -> None:
        self._expect(WizardStep.GENERATE)
        self.generated_video = video_url
        self.step = WizardStep.RESULT

    def begin_request(self) -> None:
        """Disable the trigger; only one call may be outstanding."""
        if self.busy:
            raise WizardError("a request is already in flight")
        self.busy = True

    def end_request(self) -> None:
        # Called on success and on failure alike so the button is re-armed
        self.busy = False

    def reset(self) -> None:
        self.step = WizardStep.UPLOAD
        self.uploaded_image = None
        self.enhanced_image = None
        self.detected_items = []
        self.generated_video = None
        self.busy = False
