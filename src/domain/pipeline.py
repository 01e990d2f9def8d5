"""
Error pipeline - Ordered stages that turn a Failure into a response.

Pipeline (strict order, per failure)
====================================

    Logging -> Alerting -> Classification -> Default

Each stage receives the same Failure and either returns a response,
which ends the chain, or returns None to forward the Failure untouched.
Logging and Alerting always forward. Classification answers NOT_FOUND
failures with 404. Default answers everything else with 500, so every
failure gets exactly one of those two statuses.

Validation rejections never enter the pipeline.
"""

import asyncio
import html
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .failures import Failure
from .ports import AlertMessage, AlertSender, ErrorLog

logger = logging.getLogger(__name__)

NOT_FOUND_FALLBACK = "Oops! Resource not found"
SERVER_ERROR_FALLBACK = "Oops! Server failed"
ALERT_FALLBACK = "Oops! Error Occured"
DEFAULT_ALERT_SUBJECT = "You Experienced an Error"


@dataclass(frozen=True)
class PipelineResponse:
    """Terminal response produced by a stage."""

    status_code: int
    body: str


class PipelineStage(Protocol):
    """A single step of the error pipeline."""

    terminal: bool

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        """Return a response to stop the chain, or None to forward."""
        ...


class LoggingStage:
    """Append every failure to the error log, then forward it."""

    terminal = False

    def __init__(self, error_log: ErrorLog) -> None:
        self._error_log = error_log

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        # Write errors are not caught here.
        self._error_log.append(failure.to_log_entry())
        return None


class AlertingStage:
    """
    Dispatch an alert for the failure without waiting for delivery.

    Delivery runs as a background task that may outlive the response.
    Delivery errors are logged and dropped, they never change the response.
    """

    terminal = False

    def __init__(
        self,
        sender: AlertSender,
        recipient: str,
        from_address: str,
        subject: str = DEFAULT_ALERT_SUBJECT,
    ) -> None:
        self._sender = sender
        self._recipient = recipient
        self._from_address = from_address
        self._subject = subject
        self._pending: set[asyncio.Task[None]] = set()

    def build_message(self, failure: Failure) -> AlertMessage:
        """Build the alert e-mail for a failure."""
        summary = failure.message or ALERT_FALLBACK
        details = json.dumps(failure.describe(), indent=4)
        return AlertMessage(
            to=self._recipient,
            sender=self._from_address,
            subject=self._subject,
            text=f"{summary}\n{details}",
            html=f"<strong>{html.escape(summary)}</strong>",
        )

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        message = self.build_message(failure)
        logger.info("Dispatching alert for %s failure to %s", failure.name, message.to)

        task = asyncio.create_task(self._deliver(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return None

    async def _deliver(self, message: AlertMessage) -> None:
        try:
            await self._sender.send(message)
        except Exception:
            logger.exception("Alert delivery failed (subject=%r)", message.subject)

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every in-flight delivery to settle."""
        if self._pending:
            await asyncio.gather(*self._pending)


class ClassificationStage:
    """Answer NOT_FOUND failures with 404, forward everything else."""

    terminal = False

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        if failure.is_not_found:
            return PipelineResponse(404, failure.message or NOT_FOUND_FALLBACK)
        return None


class DefaultStage:
    """Answer any failure with 500."""

    terminal = True

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        return PipelineResponse(500, failure.message or SERVER_ERROR_FALLBACK)


class ErrorPipeline:
    """
    Run failures through an ordered sequence of stages.

    The last stage must be terminal so that every failure is answered.
    """

    def __init__(self, stages: Sequence[PipelineStage]) -> None:
        if not stages or not stages[-1].terminal:
            raise ValueError("The last pipeline stage must be terminal")
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[PipelineStage, ...]:
        return self._stages

    @classmethod
    def standard(
        cls,
        error_log: ErrorLog,
        alert_sender: AlertSender,
        recipient: str,
        from_address: str,
        subject: str = DEFAULT_ALERT_SUBJECT,
    ) -> "ErrorPipeline":
        """Build the logging, alerting, classification, default pipeline."""
        return cls(
            [
                LoggingStage(error_log),
                AlertingStage(alert_sender, recipient, from_address, subject),
                ClassificationStage(),
                DefaultStage(),
            ]
        )

    async def handle(self, failure: Failure) -> PipelineResponse:
        """
        Pass the failure through each stage until one responds.

        Args:
            failure: Failure raised while handling a request

        Returns:
            Response emitted by the first terminating stage
        """
        for stage in self._stages:
            response = await stage.handle(failure)
            if response is not None:
                return response
        raise RuntimeError("No pipeline stage produced a response")

    async def drain(self) -> None:
        """Wait for background work started by any stage."""
        for stage in self._stages:
            if isinstance(stage, AlertingStage):
                await stage.drain()
