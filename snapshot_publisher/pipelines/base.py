"""Pipeline class with fluent API for composing actions."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..predicates.base import Predicate, AllOf
from ..actions.base import Action
from ..core.types import PipelineContext, ActionResult, Status

logger = logging.getLogger('snapshot_publisher')


@dataclass
class PipelineStep:
    """A single step in a pipeline."""
    action: Action
    predicate: Optional[Predicate] = None  # None means always run
    stop_on_failure: bool = True  # Stop pipeline if this step fails


@dataclass
class Branch:
    """A conditional branch in a pipeline."""
    predicate: Predicate
    action: Action
    else_action: Optional[Action] = None


class Pipeline:
    """Composable, strictly sequential pipeline of actions.

    Global predicates gate the whole pipeline. Branches run first and pick
    one of two actions; linear steps follow in declaration order. No step
    starts before the previous one has finished, and a failing step stops
    the pipeline unless it was added with stop_on_failure=False.

    Example usage:
        pipeline = Pipeline("publish").when(
            IsSnapshotVersion(version)
        ).branch(
            when=not_(HasGitDirectory()),
            then=CloneAction(),
            else_=VerifyWorkingCopyAction()
        ).then(
            ResetAction(ref)
        ).then_if(
            CommitCreated(), GitPushAction(PushSpec())
        )
    """

    # Class attributes for registry
    name: str = "base"
    description: str = "Base pipeline"
    safe_parallel: bool = True

    def __init__(self, name: Optional[str] = None, description: Optional[str] = None):
        """Initialize a pipeline.

        Args:
            name: Pipeline name (overrides class attribute)
            description: Pipeline description (overrides class attribute)
        """
        if name:
            self.name = name
        if description:
            self.description = description

        self._predicates: List[Predicate] = []
        self._steps: List[PipelineStep] = []
        self._branches: List[Branch] = []

    def when(self, *predicates: Predicate) -> 'Pipeline':
        """Add predicates that must pass before pipeline executes.

        All predicates are combined with AND logic.
        """
        self._predicates.extend(predicates)
        return self

    def then(self, action: Action, stop_on_failure: bool = True) -> 'Pipeline':
        """Add an action to execute unconditionally."""
        self._steps.append(PipelineStep(
            action=action,
            predicate=None,
            stop_on_failure=stop_on_failure
        ))
        return self

    def then_if(
        self,
        predicate: Predicate,
        action: Action,
        stop_on_failure: bool = True
    ) -> 'Pipeline':
        """Add an action that only executes if predicate passes.

        Args:
            predicate: Predicate to check
            action: Action to execute if predicate passes
            stop_on_failure: Stop pipeline if action fails

        Returns:
            Self for chaining
        """
        self._steps.append(PipelineStep(
            action=action,
            predicate=predicate,
            stop_on_failure=stop_on_failure
        ))
        return self

    def branch(
        self,
        when: Predicate,
        then: Action,
        else_: Optional[Action] = None
    ) -> 'Pipeline':
        """Add a conditional branch.

        If predicate passes, execute 'then' action.
        Optionally execute 'else_' action if predicate fails.
        """
        self._branches.append(Branch(
            predicate=when,
            action=then,
            else_action=else_
        ))
        return self

    @property
    def steps(self) -> List[PipelineStep]:
        return list(self._steps)

    def should_skip(self, ctx: PipelineContext) -> Optional[str]:
        """Check if the pipeline should be skipped entirely.

        Args:
            ctx: Pipeline context

        Returns:
            Skip reason if should skip, None otherwise
        """
        if not self._predicates:
            return None

        combined = AllOf(*self._predicates) if len(self._predicates) > 1 else self._predicates[0]
        passes, reason = combined.check(ctx)

        if not passes:
            return reason
        return None

    def execute(self, ctx: PipelineContext) -> ActionResult:
        """Execute the pipeline.

        Args:
            ctx: Pipeline context

        Returns:
            The failing ActionResult, or the last result if every step ran
        """
        skip_reason = self.should_skip(ctx)
        if skip_reason:
            return ActionResult(
                status=Status.SKIPPED,
                message=skip_reason,
                action_name=self.name
            )

        # Branches first (they prepare the working copy)
        for branch in self._branches:
            passes, _ = branch.predicate.check(ctx)
            action = branch.action if passes else branch.else_action
            if action is None:
                continue
            result = self._run(action, ctx)
            if result.failed:
                return result

        for step in self._steps:
            if step.predicate:
                passes, reason = step.predicate.check(ctx)
                if not passes:
                    self._record(ctx, ActionResult(
                        status=Status.SKIPPED,
                        message=reason,
                        action_name=step.action.name
                    ))
                    continue

            result = self._run(step.action, ctx)
            if result.failed and step.stop_on_failure:
                return result

        if ctx.results:
            return ctx.last_result
        return ActionResult(
            status=Status.SUCCESS,
            message="Pipeline completed (no actions)",
            action_name=self.name
        )

    def _run(self, action: Action, ctx: PipelineContext) -> ActionResult:
        logger.debug(f"[{self.name}] {action.name}: {action.description}")
        result = action.execute(ctx)
        self._record(ctx, result)
        return result

    def _record(self, ctx: PipelineContext, result: ActionResult) -> None:
        ctx.add_result(result)
        if result.success:
            logger.info(f"✓ {result.action_name}: {result.message}")
        elif result.skipped:
            logger.info(f"⊘ {result.action_name}: {result.message}")
        else:
            logger.error(f"✗ {result.action_name}: {result.message}")
