"""
Product Launch Engine — runs the launch steps as one all-or-nothing transaction.

Lifecycle of one launch:
  Idle → TransactionOpen → StepRunning(1..9) → Committed → PostCommitRunning → Done(success)
  any step / begin / commit failure → RolledBack → Done(failure)

Callers only ever see two failure messages: the duplicate-name message and a
generic one. The internal failure kind and the original error are logged.
Nothing is retried.
"""

import asyncio
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

import structlog

from core.exceptions import DomainError, DuplicateProductNameError, EntityNotFoundError
from db.unit_of_work import UnitOfWork
from launch.collaborators import LaunchCollaborators
from launch.schemas import LaunchRequest, LaunchResult, ProductSummary, UserSummary
from launch.steps import (
    LaunchContext,
    LaunchStep,
    PostCommitAction,
    default_launch_steps,
    default_post_commit_actions,
)

logger = structlog.get_logger()

DUPLICATE_PRODUCT_MESSAGE = "A product with the same name already exists."
GENERIC_LAUNCH_FAILURE_MESSAGE = "An error occurred while launching the product."


class LaunchFailureKind(str, Enum):
    """Internal failure tag. Logged, never returned to the caller."""

    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"


def classify_failure(exc: Exception) -> LaunchFailureKind:
    # Only the product name collision is reported as a duplicate; any other
    # duplicate raised by a collaborator is a generic failure.
    if isinstance(exc, DuplicateProductNameError):
        return LaunchFailureKind.DUPLICATE
    if isinstance(exc, EntityNotFoundError):
        return LaunchFailureKind.NOT_FOUND
    if isinstance(exc, (ValueError, DomainError)):
        return LaunchFailureKind.VALIDATION
    return LaunchFailureKind.UNEXPECTED


def failure_message(kind: LaunchFailureKind) -> str:
    if kind is LaunchFailureKind.DUPLICATE:
        return DUPLICATE_PRODUCT_MESSAGE
    return GENERIC_LAUNCH_FAILURE_MESSAGE


def _elapsed_ms(started_at: datetime) -> float:
    return round((datetime.utcnow() - started_at).total_seconds() * 1000, 1)


class ProductLaunchEngine:
    """
    Launch a product through an ordered sequence of steps.

    Args:
        uow: Unit of work providing the repositories and the transaction.
        collaborators: Subsystems used to build the default steps and
            post-commit actions.
        steps: Replaces the default step sequence when given.
        post_commit_actions: Replaces the default post-commit actions when given.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        collaborators: LaunchCollaborators | None = None,
        steps: Sequence[LaunchStep] | None = None,
        post_commit_actions: Sequence[PostCommitAction] | None = None,
    ):
        collaborators = collaborators or LaunchCollaborators()
        self.uow = uow
        self.steps = list(steps) if steps is not None else default_launch_steps(collaborators)
        self.post_commit_actions = (
            list(post_commit_actions)
            if post_commit_actions is not None
            else default_post_commit_actions(collaborators)
        )

    async def launch(self, request: LaunchRequest, acting_user: UserSummary) -> LaunchResult:
        if request is None:
            raise ValueError("launch request is required")
        if acting_user is None:
            raise ValueError("acting user is required")

        ctx = LaunchContext(request=request, acting_user=acting_user, uow=self.uow)
        log = logger.bind(
            requested_product_id=request.product_id,
            product_name=request.product_name,
            acting_user_id=acting_user.id,
        )
        log.info("product_launch.started", steps=[step.name for step in self.steps])

        # Steps that were entered, including one that failed halfway
        started: list[LaunchStep] = []
        current: str | None = "begin"
        try:
            await self.uow.begin()
            for step in self.steps:
                current = step.name
                started.append(step)
                await step.execute(ctx)
            current = "commit"
            await self.uow.save()
            await self.uow.commit()
        except Exception as exc:
            kind = classify_failure(exc)
            log.warning(
                "product_launch.failed",
                step=current,
                failure_kind=kind.value,
                error_type=type(exc).__name__,
                error=str(exc),
                duration_ms=_elapsed_ms(ctx.started_at),
                exc_info=kind is LaunchFailureKind.UNEXPECTED,
            )
            await self._roll_back(ctx, started, log)
            return LaunchResult.failed(failure_message(kind))

        product = ProductSummary.model_validate(ctx.require_product())
        result = LaunchResult.succeeded(
            product=product,
            campaign_ids=[campaign.id for campaign in ctx.campaigns],
            launch_date=request.launch_date,
        )
        log.info(
            "product_launch.committed",
            product_id=product.id,
            campaign_ids=result.campaign_ids,
            duration_ms=_elapsed_ms(ctx.started_at),
        )

        await self._run_post_commit(ctx, product, log)
        return result

    async def _roll_back(self, ctx: LaunchContext, started: list[LaunchStep], log) -> None:
        try:
            await self.uow.rollback()
        except Exception as exc:
            log.error("product_launch.rollback_failed", error=str(exc), exc_info=True)

        for step in reversed(started):
            try:
                await step.compensate(ctx)
            except Exception as exc:
                log.error("product_launch.compensation_failed", step=step.name, error=str(exc))

        log.info("product_launch.rolled_back", compensated_steps=[step.name for step in reversed(started)])

    async def _run_post_commit(self, ctx: LaunchContext, product: ProductSummary, log) -> None:
        if not self.post_commit_actions:
            return
        await asyncio.gather(
            *(self._run_isolated(action, ctx, product, log) for action in self.post_commit_actions)
        )

    async def _run_isolated(self, action: PostCommitAction, ctx: LaunchContext, product: ProductSummary, log) -> None:
        try:
            await action.run(product, list(ctx.campaigns))
        except Exception as exc:
            log.error(
                "product_launch.post_commit_failed",
                action=action.name,
                product_id=product.id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        else:
            log.info("product_launch.post_commit_completed", action=action.name, product_id=product.id)
