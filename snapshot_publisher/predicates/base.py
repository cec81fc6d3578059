"""Predicate interface and the combinators the pipelines compose guards with."""

from abc import ABC, abstractmethod
from typing import Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.types import PipelineContext


class Predicate(ABC):
    """A condition checked against the pipeline context.

    A pipeline uses predicates twice: as guards that skip the whole run
    (`Pipeline.when`) and as conditions that pick a branch or gate a single
    step (`Pipeline.branch`, `Pipeline.then_if`).
    """

    @abstractmethod
    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        """Evaluate the condition.

        Args:
            ctx: Pipeline context

        Returns:
            (passes, reason), where reason is logged when a step is skipped
        """


class AllOf(Predicate):
    """Passes when every predicate passes; reports the first that does not."""

    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        for predicate in self.predicates:
            passes, reason = predicate.check(ctx)
            if not passes:
                return False, reason
        return True, f"{len(self.predicates)} condition(s) met"


class Not(Predicate):
    """Inverts a predicate, keeping its reason."""

    def __init__(self, predicate: Predicate):
        self.predicate = predicate

    def check(self, ctx: 'PipelineContext') -> Tuple[bool, str]:
        passes, reason = self.predicate.check(ctx)
        return not passes, f"Not: {reason}"


def not_(predicate: Predicate) -> Not:
    """Negate a predicate, e.g. `not_(HasGitDirectory())`."""
    return Not(predicate)
