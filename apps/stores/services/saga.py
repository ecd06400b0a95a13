"""
Minimal synchronous saga: run steps in order, and when one fails run
the compensations of the steps that already succeeded, newest first.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SagaStep:
    name: str
    action: Callable[[Dict[str, Any]], Any]
    compensate: Optional[Callable[[Any], None]] = None


class Saga:
    """
    Steps receive the results of earlier steps as a dict keyed by
    step name. A step's compensation receives that step's own result.

    Example:
        saga = Saga('create-merchant')
        saga.step('account', lambda r: idp.create_account(...),
                  compensate=lambda account: idp.delete_account(account[0]))
        saga.step('profile', lambda r: Merchant.objects.create(user_id=r['account'][0], ...))
        results = saga.run()
    """

    def __init__(self, name: str):
        self.name = name
        self.steps: List[SagaStep] = []

    def step(self, name: str, action, compensate=None) -> 'Saga':
        self.steps.append(SagaStep(name=name, action=action, compensate=compensate))
        return self

    def run(self) -> Dict[str, Any]:
        """
        Execute every step.

        Returns:
            Results keyed by step name

        Raises:
            The first step's exception, after compensations have run
        """
        results: Dict[str, Any] = {}
        completed: List[Tuple[SagaStep, Any]] = []

        for saga_step in self.steps:
            try:
                value = saga_step.action(results)
            except Exception as e:
                logger.warning(f"Saga '{self.name}' failed at step '{saga_step.name}': {e}")
                self._compensate(completed)
                raise
            results[saga_step.name] = value
            completed.append((saga_step, value))

        return results

    def _compensate(self, completed: List[Tuple[SagaStep, Any]]) -> Tuple[int, int]:
        """Run compensators in reverse. Returns (run, failed)."""
        comp_run = 0
        comp_failed = 0

        for saga_step, value in reversed(completed):
            if saga_step.compensate is None:
                continue
            try:
                saga_step.compensate(value)
                comp_run += 1
            except Exception:
                comp_failed += 1
                logger.exception(
                    f"Saga '{self.name}' compensation for step '{saga_step.name}' failed"
                )

        logger.info(f"Saga '{self.name}' rolled back: {comp_run} compensations run, {comp_failed} failed")
        return comp_run, comp_failed
