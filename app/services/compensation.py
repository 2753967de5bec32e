"""Compensation stack for multi-step writes that cannot share one transaction.

Each committed step registers an undo action. When a later step fails the
stack is unwound newest-first; every undo is retried a bounded number of
times and the ones that still fail are returned to the caller so it can flag
the affected records for manual review.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from models import db

logger = logging.getLogger(__name__)


@dataclass
class UndoStep:
    description: str
    action: Callable[..., Any]
    args: Tuple = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)
    # Free-form key the caller uses to find what a failed undo left behind
    ref: Any = None


@dataclass
class UndoFailure:
    step: UndoStep
    error: Exception


class CompensationStack:
    def __init__(self, retries: int = 3, delay: float = 0.0, label: str = "saga"):
        self.retries = max(1, int(retries))
        self.delay = delay
        self.label = label
        self._steps: List[UndoStep] = []

    def __len__(self):
        return len(self._steps)

    def push(self, description, action, *args, ref=None, **kwargs):
        self._steps.append(UndoStep(description, action, args, kwargs, ref))

    def discard(self):
        """Forget registered undo steps once the whole operation succeeded."""
        self._steps.clear()

    def _run(self, step: UndoStep):
        last_exc = None
        for attempt in range(1, self.retries + 1):
            try:
                step.action(*step.args, **step.kwargs)
                return None
            except Exception as exc:
                last_exc = exc
                db.session.rollback()
                logger.warning(
                    "%s: undo '%s' failed (attempt %s/%s): %s",
                    self.label, step.description, attempt, self.retries, exc,
                )
                if attempt < self.retries and self.delay:
                    time.sleep(self.delay * attempt)
        return last_exc

    def unwind(self) -> List[UndoFailure]:
        failures = []
        while self._steps:
            step = self._steps.pop()
            exc = self._run(step)
            if exc is not None:
                logger.error("%s: giving up on undo '%s'", self.label, step.description)
                failures.append(UndoFailure(step, exc))
        return failures
