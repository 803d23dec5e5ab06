"""Search sessions: the message boundary between a host and the GA core.

A :class:`MatchingSession` owns the preference model and run configuration
of one host connection. Hosts either call the typed methods directly or feed
raw ``{"type": ..., "payload": ...}`` dicts to :meth:`MatchingSession.handle`.
Outgoing messages are pushed into a sink callable as plain dicts, in order:
zero or more ``progress`` messages, then exactly one ``result``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import numpy as np
from pydantic import ValidationError

from .config.schemas import RunConfig
from .matching.ga.evaluation import evaluate_solution
from .matching.ga.genetic import GeneticRun, run_genetic_algorithm
from .matching.models import PreferenceModel
from .protocol import (
    EvaluateMessage,
    EvaluateRequest,
    InitRequest,
    ProgressMessage,
    ResultMessage,
    ResultPayload,
    RunRequest,
)

__all__ = ["MatchingSession", "SessionError", "MessageSink"]

logger = logging.getLogger(__name__)

MessageSink = Callable[[dict[str, Any]], None]


class SessionError(RuntimeError):
    """Raised when a typed request arrives before the session is initialised."""


class MatchingSession:
    def __init__(
        self,
        model: PreferenceModel | None = None,
        *,
        config: RunConfig | None = None,
    ) -> None:
        self.model = model
        self.config = config
        self.last_run: GeneticRun | None = None
        self._cancel_requested = False

    @property
    def initialised(self) -> bool:
        return self.model is not None

    def init(self, request: InitRequest) -> None:
        self.model = request.to_model()
        logger.info(
            "Session initialised with %d graduates and %d placements",
            len(self.model.graduates),
            len(self.model.placements),
        )

    def cancel(self) -> None:
        """Ask a running search to stop at the start of its next generation."""
        self._cancel_requested = True

    def run(
        self,
        request: RunRequest,
        sink: MessageSink,
        *,
        rng: np.random.Generator | None = None,
    ) -> ResultMessage:
        inline = request.init_request()
        if inline is not None:
            self.init(inline)
        if self.model is None:
            raise SessionError("run requested before init")

        config = request.run_config(self.config)
        self._cancel_requested = False

        def report(percent: int) -> None:
            sink(ProgressMessage(payload=percent).model_dump(by_alias=True))

        run = run_genetic_algorithm(
            self.model,
            config,
            rng,
            on_progress=report,
            should_stop=lambda: self._cancel_requested,
        )
        self.last_run = run
        message = ResultMessage(
            payload=ResultPayload(
                solution=dict(run.best.solution),
                fitness=run.best.fitness,
                manager_weighting=config.manager_weighting,
                evaluation=evaluate_solution(run.best.solution, self.model).lines(),
            )
        )
        sink(message.model_dump(by_alias=True))
        return message

    def evaluate(self, request: EvaluateRequest) -> EvaluateMessage:
        if self.model is None:
            raise SessionError("evaluate requested before init")
        lines = evaluate_solution(request.solution, self.model).lines()
        return EvaluateMessage(payload=lines)

    def handle(self, message: Mapping[str, Any], sink: MessageSink) -> None:
        """Dispatch one raw host message; problems are logged, never raised."""
        kind = message.get("type")
        payload = message.get("payload") or {}
        try:
            if kind == "init":
                self.init(InitRequest.model_validate(payload))
            elif kind == "run":
                self.run(RunRequest.model_validate(payload), sink)
            elif kind == "evaluate":
                sink(self.evaluate(EvaluateRequest.model_validate(payload)).model_dump(by_alias=True))
            else:
                logger.warning("Unknown message type: %s", kind)
        except SessionError as exc:
            logger.warning("Ignoring %s message: %s", kind, exc)
        except ValidationError as exc:
            logger.error("Invalid %s payload: %s", kind, exc)
        except ValueError as exc:
            logger.error("Rejected %s payload: %s", kind, exc)
