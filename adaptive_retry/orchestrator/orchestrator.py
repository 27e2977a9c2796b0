"""
Retry Orchestrator

Drives the quality-gated retry loop for one generation job: analyze the
latest failure, select a strategy, adjust parameters, generate, validate,
and record, until an attempt passes or the attempt or cost budget runs out.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..analysis.analyzer import FailureAnalyzer
from ..analysis.types import FailureAnalysis
from ..config import RetryConfig, cost_for_tier
from ..errors import (
    AttemptsExhaustedError,
    BudgetExceededError,
    InvalidRequestError,
)
from ..history import Attempt, best_score, next_index, total_cost
from ..learning.store import LearningStore
from ..learning.types import LearningStatistics
from ..parameters import ParameterKey
from ..strategy.selector import StrategySelector
from ..strategy.types import Strategy
from ..validation.types import ValidationResult
from ..validation.validator import QualityValidator, SafeQualityValidator
from .recommendations import build_recommendations
from .types import (
    ArtifactGenerator,
    EpisodeResult,
    EpisodeState,
    FailureResult,
    GenerationRequest,
    PartialSuccessResult,
    SuccessResult,
    TerminationReason,
)

logger = logging.getLogger(__name__)

# Absorbs float noise when comparing summed costs against the ceiling
_COST_PRECISION = 10


@dataclass
class EpisodeJob:
    """Inputs for one episode when running several concurrently."""

    request: GenerationRequest
    initial_validation: ValidationResult
    prior_history: Sequence[Attempt] = ()
    job_id: str | None = None


@dataclass
class _EpisodeRun:
    """Mutable bookkeeping for one running episode."""

    job_id: str
    request: GenerationRequest
    history: list[Attempt]
    cancel_event: asyncio.Event
    latest_validation: ValidationResult
    states: list[EpisodeState]
    strategy: Strategy | None = None
    repeat: int = 0
    attempts_used: int = 0
    loop_best: Attempt | None = None

    def enter(self, state: EpisodeState) -> None:
        self.states.append(state)
        logger.debug(f"Job {self.job_id}: -> {state.value}")


class RetryOrchestrator:
    """
    Orchestrate adaptive retry episodes.

    Every iteration recomputes the failure analysis and strategy from the
    current history. Generation and validation failures are recovered
    locally; only malformed requests propagate to the caller. Attempts of one
    episode run strictly in sequence, while separate episodes may run
    concurrently and share one injected LearningStore.

    Example:
        orchestrator = RetryOrchestrator(generator, validator, LearningStore())
        result = await orchestrator.run_retry_episode(request, validation, job_id="job-1")
        if result.success:
            publish(result.attempt.artifact_ref)
        else:
            print(result.summary())
    """

    def __init__(
        self,
        generator: ArtifactGenerator,
        validator: QualityValidator,
        learning_store: LearningStore | None = None,
        config: RetryConfig | None = None,
        analyzer: FailureAnalyzer | None = None,
        selector: StrategySelector | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            generator: External generation backend
            validator: External quality validator; its errors are absorbed
            learning_store: Shared outcome ledger; a private one if omitted
            config: Retry configuration
            analyzer: Failure analyzer
            selector: Strategy selector (owns the parameter adjuster)
        """
        self.generator = generator
        if not isinstance(validator, SafeQualityValidator):
            validator = SafeQualityValidator(validator)
        self.validator = validator
        self.learning_store = learning_store if learning_store is not None else LearningStore()
        self.config = config or RetryConfig()
        self.analyzer = analyzer or FailureAnalyzer()
        self.selector = selector or StrategySelector()
        self._cancel_events: dict[str, asyncio.Event] = {}

    # -- budget checks -----------------------------------------------------

    def ensure_can_retry(self, history: Sequence[Attempt], strategy: Strategy) -> None:
        """
        Check the global attempt and cost limits before starting an attempt.

        Raises:
            AttemptsExhaustedError: If the history already holds max_retries attempts
            BudgetExceededError: If the strategy's estimated cost would breach the ceiling
        """
        if len(history) >= self.config.max_retries:
            raise AttemptsExhaustedError(
                f"Max retries ({self.config.max_retries}) reached",
                attempts_used=len(history),
                max_attempts=self.config.max_retries,
            )

        current = total_cost(history)
        projected = round(current + strategy.estimated_cost, _COST_PRECISION)
        if projected > self.config.cost_limit:
            raise BudgetExceededError(
                f"Cost limit (${self.config.cost_limit:.2f}) would be exceeded",
                current_cost=current,
                estimated_cost=strategy.estimated_cost,
                cost_limit=self.config.cost_limit,
            )

    def can_retry(self, history: Sequence[Attempt], strategy: Strategy) -> bool:
        """Whether another attempt may start under the attempt and cost limits."""
        try:
            self.ensure_can_retry(history, strategy)
        except (AttemptsExhaustedError, BudgetExceededError) as e:
            logger.info(f"Retry not allowed: {e.message}")
            return False
        return True

    # -- episode -----------------------------------------------------------

    async def run_retry_episode(
        self,
        request: GenerationRequest,
        initial_validation: ValidationResult,
        prior_history: Sequence[Attempt] = (),
        job_id: str | None = None,
    ) -> EpisodeResult:
        """
        Run one retry episode.

        Args:
            request: The job's generation request
            initial_validation: Failing validation that triggered the retry
            prior_history: Attempts already made for this job, oldest first
            job_id: Job identifier; generated when omitted

        Returns:
            SuccessResult, PartialSuccessResult or FailureResult

        Raises:
            InvalidRequestError: If the request is malformed or the initial
                validation already passes
        """
        if not isinstance(request, GenerationRequest):
            raise InvalidRequestError(
                f"Expected GenerationRequest, got {type(request).__name__}"
            )
        if initial_validation.passes:
            raise InvalidRequestError("Initial validation already passes; nothing to retry")

        job_id = job_id or uuid.uuid4().hex
        if job_id in self._cancel_events:
            raise InvalidRequestError(f"Job {job_id} already has a running episode")

        run = _EpisodeRun(
            job_id=job_id,
            request=request,
            history=list(prior_history),
            cancel_event=asyncio.Event(),
            latest_validation=initial_validation,
            states=[EpisodeState.INIT, EpisodeState.VALIDATING],
        )
        self._cancel_events[job_id] = run.cancel_event

        logger.info(
            f"Starting adaptive retry for job {job_id} "
            f"(prior attempts: {len(run.history)}, score: {initial_validation.overall_quality:.1%})"
        )
        try:
            result = await self._run_loop(run)
        finally:
            self._cancel_events.pop(job_id, None)

        logger.info(f"Job {job_id} finished: {result.reason.value}, cost ${result.total_cost:.2f}")
        return result

    async def _run_loop(self, run: _EpisodeRun) -> EpisodeResult:
        while True:
            run.enter(EpisodeState.ANALYZING)
            analysis = self.analyzer.analyze(run.latest_validation, run.history)

            run.enter(EpisodeState.SELECTING)
            strategy = self.selector.select(analysis, run.history)
            same = run.strategy is not None and strategy.type is run.strategy.type
            run.repeat = run.repeat + 1 if same else 1
            run.strategy = strategy

            if run.cancel_event.is_set():
                return self._cancelled(run)

            try:
                self.ensure_can_retry(run.history, strategy)
            except BudgetExceededError as e:
                logger.info(f"Job {run.job_id}: {e.message}")
                run.enter(EpisodeState.BUDGET_EXCEEDED)
                return self._failure(run, TerminationReason.BUDGET_EXCEEDED, e.message)
            except AttemptsExhaustedError as e:
                logger.info(f"Job {run.job_id}: {e.message}")
                return self._exhausted(run)

            run.enter(EpisodeState.ADJUSTING)
            parameters = self.selector.adjuster.progressive(
                strategy.parameter_adjustments, run.repeat
            )

            attempt = await self._attempt(run, strategy, parameters)
            run.history.append(attempt)
            run.attempts_used += 1

            if attempt.validation is not None:
                run.latest_validation = attempt.validation
                best = run.loop_best
                if best is None or attempt.score > best.score:  # type: ignore[operator]
                    run.loop_best = attempt
                logger.info(
                    f"Job {run.job_id} attempt {attempt.index} "
                    f"({run.attempts_used}/{strategy.max_attempts}): "
                    f"score {attempt.score:.1%} (best: {run.loop_best.score:.1%})"
                )
                if attempt.passed:
                    run.enter(EpisodeState.PASSED)
                    return self._success(run, attempt)

            if run.attempts_used >= strategy.max_attempts:
                return self._exhausted(run)

    async def _attempt(
        self,
        run: _EpisodeRun,
        strategy: Strategy,
        parameters: Mapping[ParameterKey, float],
    ) -> Attempt:
        index = next_index(run.history)

        run.enter(EpisodeState.GENERATING)
        try:
            output = await self.generator.generate(run.request, parameters)
        except Exception as e:
            logger.warning(f"Job {run.job_id}: generation failed on attempt {index}: {e}")
            return Attempt(
                index=index,
                parameters=parameters,
                validation=None,
                cost=self.config.default_attempt_cost,
                strategy_type=strategy.type.value,
                error=str(e),
            )

        run.enter(EpisodeState.VALIDATING)
        validation = await self.validator.validate(
            output.artifact_ref,
            run.request.reference_id,
            run.request.pose,
            product_ref=run.request.product_ref,
            quality_tier=strategy.quality_tier,
        )

        cost = output.cost
        if cost is None or cost < 0:
            cost = cost_for_tier(strategy.quality_tier)

        return Attempt(
            index=index,
            parameters=parameters,
            validation=validation,
            cost=cost,
            strategy_type=strategy.type.value,
            artifact_ref=output.artifact_ref,
        )

    # -- results -----------------------------------------------------------

    def _common(self, run: _EpisodeRun) -> dict[str, Any]:
        return {
            "job_id": run.job_id,
            "total_cost": total_cost(run.history),
            "attempts_used": run.attempts_used,
            "total_attempts": len(run.history),
            "strategy": run.strategy.type if run.strategy else None,
            "history": tuple(run.history),
        }

    def _success(self, run: _EpisodeRun, attempt: Attempt) -> SuccessResult:
        run.enter(EpisodeState.DONE)
        logger.info(
            f"Retry successful for job {run.job_id} on attempt {attempt.index} "
            f"with score {attempt.score:.1%}"
        )
        result = SuccessResult(
            **self._common(run),
            best_score=attempt.score or 0.0,
            reason=TerminationReason.PASSED,
            attempt=attempt,
            states=tuple(run.states),
        )
        self._record_learning(run, result)
        return result

    def _exhausted(self, run: _EpisodeRun) -> EpisodeResult:
        run.enter(EpisodeState.EXHAUSTED)
        best = run.loop_best
        if best is not None and (best.score or 0.0) > self.config.partial_success_threshold:
            run.enter(EpisodeState.DONE)
            logger.info(
                f"Job {run.job_id}: returning best attempt {best.index} "
                f"with score {best.score:.1%}"
            )
            result = PartialSuccessResult(
                **self._common(run),
                best_score=best.score or 0.0,
                reason=TerminationReason.ATTEMPTS_EXHAUSTED,
                attempt=best,
                states=tuple(run.states),
            )
            self._record_learning(run, result)
            return result

        if run.attempts_used:
            error = "All retry attempts failed to meet quality requirements"
        else:
            error = "Maximum retries exceeded without achieving acceptable quality"
        return self._failure(run, TerminationReason.ATTEMPTS_EXHAUSTED, error)

    def _failure(self, run: _EpisodeRun, reason: TerminationReason, error: str) -> FailureResult:
        run.enter(EpisodeState.DONE)
        analysis = self._final_analysis(run)
        exhausted = (
            reason is TerminationReason.ATTEMPTS_EXHAUSTED
            or len(run.history) >= self.config.max_retries
        )
        result = FailureResult(
            **self._common(run),
            best_score=best_score(run.history),
            reason=reason,
            error=error,
            failure_analysis=analysis,
            recommendations=build_recommendations(analysis, exhausted),
            states=tuple(run.states),
        )
        logger.info(f"Job {run.job_id} failed: {error} (best score {result.best_score:.1%})")
        self._record_learning(run, result)
        return result

    def _cancelled(self, run: _EpisodeRun) -> FailureResult:
        run.enter(EpisodeState.CANCELLED)
        run.enter(EpisodeState.DONE)
        logger.info(f"Job {run.job_id} cancelled after {run.attempts_used} attempts")
        analysis = self._final_analysis(run)
        return FailureResult(
            **self._common(run),
            best_score=best_score(run.history),
            reason=TerminationReason.CANCELLED,
            error="Episode cancelled",
            failure_analysis=analysis,
            recommendations=build_recommendations(analysis, exhausted=False),
            states=tuple(run.states),
        )

    def _final_analysis(self, run: _EpisodeRun) -> FailureAnalysis:
        return self.analyzer.analyze(run.latest_validation, run.history)

    def _record_learning(self, run: _EpisodeRun, result: EpisodeResult) -> None:
        # Episodes that never started an attempt are not recorded
        if not self.config.enable_learning or run.strategy is None or run.attempts_used == 0:
            return
        try:
            self.learning_store.update_on_episode_end(run.strategy, result, run.history)
        except Exception as e:
            logger.warning(f"Learning update failed for job {run.job_id}: {e}")

    # -- control surface ---------------------------------------------------

    def cancel(self, job_id: str) -> bool:
        """
        Stop a running episode before its next attempt.

        Attempts already recorded are kept. Returns False when no episode
        with that id is running.
        """
        event = self._cancel_events.get(job_id)
        if event is None:
            return False
        event.set()
        logger.info(f"Cancellation requested for job {job_id}")
        return True

    async def run_episodes(self, jobs: Sequence[EpisodeJob]) -> list[EpisodeResult]:
        """Run independent episodes concurrently; results keep the input order."""
        return list(
            await asyncio.gather(
                *(
                    self.run_retry_episode(
                        job.request,
                        job.initial_validation,
                        prior_history=job.prior_history,
                        job_id=job.job_id,
                    )
                    for job in jobs
                )
            )
        )

    def get_learning_statistics(self) -> LearningStatistics:
        """Snapshot of the learning store."""
        return self.learning_store.get_statistics()

    def reset_learning_data(self) -> None:
        """Clear the learning store."""
        self.learning_store.reset()

    def update_configuration(self, changes: Mapping[str, Any]) -> RetryConfig:
        """
        Apply typed configuration changes.

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        self.config = self.config.updated(changes)
        logger.info(f"Configuration updated: {self.config.to_dict()}")
        return self.config
