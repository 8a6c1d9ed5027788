"""Ordered multi-step writes with compensating actions.

The database writes behind an invoice are separate committed calls, not one
transaction. A Saga runs them in order and, when a required step fails, runs
the compensations of the steps that already completed, newest first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from invoicedesk.core.errors import RecordStoreFailure

logger = logging.getLogger(__name__)

Context = Dict[str, Any]


@dataclass
class SagaStep:
    name: str
    action: Callable[[Context], Any]
    compensation: Optional[Callable[[Context], None]] = None
    required: bool = True


@dataclass
class Saga:
    name: str
    steps: List[SagaStep] = field(default_factory=list)
    context: Context = field(default_factory=dict)
    completed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    compensated: List[str] = field(default_factory=list)

    def add_step(
        self,
        name: str,
        action: Callable[[Context], Any],
        compensation: Optional[Callable[[Context], None]] = None,
        required: bool = True,
    ) -> "Saga":
        self.steps.append(SagaStep(name, action, compensation, required))
        return self

    def run(self) -> Context:
        done: List[SagaStep] = []
        for step in self.steps:
            try:
                self.context[step.name] = step.action(self.context)
            except RecordStoreFailure as exc:
                if not step.required:
                    logger.warning("%s: step %s failed, continuing: %s", self.name, step.name, exc)
                    self.skipped.append(step.name)
                    continue
                self._compensate(done, exc)
                raise
            except Exception as exc:
                self._compensate(done, exc)
                raise
            done.append(step)
            self.completed.append(step.name)
        return self.context

    def _compensate(self, done: List[SagaStep], cause: Exception) -> None:
        for step in reversed(done):
            if step.compensation is None:
                continue
            try:
                step.compensation(self.context)
            except Exception:
                logger.exception("%s: compensation for %s failed after %s", self.name, step.name, cause)
                continue
            self.compensated.append(step.name)
            logger.info("%s: compensated step %s", self.name, step.name)
