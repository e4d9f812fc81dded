import logging
from typing import Any, Dict, Mapping, Optional

from .assembler import SubmissionRejected, assemble_submission
from .constants import TOTAL_STEPS
from .rules import validate_step
from .schemas.steps import STEP_MODELS

logger = logging.getLogger(__name__)


def _clamp(step: int) -> int:
    return max(1, min(TOTAL_STEPS, step))


class FormSession:
    """One claimant's progress through the eight-step claim form.

    Answers accumulate in memory and nothing is persisted until ``submit``.
    Moving back never discards answers; moving forward only happens once the
    current step validates against everything answered so far.
    """

    def __init__(self, answers: Optional[Mapping[str, Any]] = None, step: int = 1):
        self._answers: Dict[str, Any] = dict(answers or {})
        self.step = _clamp(step)

    @property
    def answers(self) -> Dict[str, Any]:
        return dict(self._answers)

    @property
    def is_last_step(self) -> bool:
        return self.step == TOTAL_STEPS

    def current_answers(self) -> Dict[str, Any]:
        fields = STEP_MODELS[self.step].model_fields
        return {name: self._answers[name] for name in fields if name in self._answers}

    def advance(self, step_data: Mapping[str, Any]) -> int:
        model = validate_step(self.step, step_data, context=self._answers)
        self._answers.update(model.model_dump(mode="json"))
        self.step = _clamp(self.step + 1)
        return self.step

    def retreat(self) -> int:
        self.step = _clamp(self.step - 1)
        return self.step

    def go_to(self, step: int) -> int:
        self.step = _clamp(step)
        return self.step

    def submit(self) -> Dict[str, Any]:
        try:
            return assemble_submission(self._answers)
        except SubmissionRejected as e:
            logger.info(f"Submission rejected, returning to step {e.step}: fields={e.paths}")
            self.step = e.step
            raise
