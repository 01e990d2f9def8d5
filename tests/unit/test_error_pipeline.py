"""
Unit tests for the error pipeline and its stages.

Coroutines are driven with asyncio.run(); background alert deliveries
are settled with drain() before assertions.
"""

import asyncio
import json
import logging

import pytest

from src.domain.failures import Failure, FailureKind
from src.domain.pipeline import (
    ALERT_FALLBACK,
    NOT_FOUND_FALLBACK,
    SERVER_ERROR_FALLBACK,
    AlertingStage,
    ClassificationStage,
    DefaultStage,
    ErrorPipeline,
    LoggingStage,
    PipelineResponse,
)
from src.domain.ports import AlertMessage
from tests.fakes import MemoryErrorLog, RecordingAlertSender

NOT_FOUND = Failure(FailureKind.NOT_FOUND, "404", "Page not found on this path: /nope", "stack")
SERVER_FAULT = Failure(FailureKind.UNCLASSIFIED, "RuntimeError", "synchronous error", "stack")


class SpyStage:
    """Stage that records the failures it sees and forwards them."""

    terminal = False

    def __init__(self, name: str, calls: list[tuple[str, Failure]]) -> None:
        self.name = name
        self.calls = calls

    async def handle(self, failure: Failure) -> PipelineResponse | None:
        self.calls.append((self.name, failure))
        return None


class BlockingAlertSender:
    """AlertSender whose delivery waits for an explicit release."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.delivered: list[AlertMessage] = []

    async def send(self, message: AlertMessage) -> None:
        await self.release.wait()
        self.delivered.append(message)


def build_pipeline(
    error_log: MemoryErrorLog, sender: RecordingAlertSender | None = None
) -> ErrorPipeline:
    return ErrorPipeline.standard(
        error_log,
        sender or RecordingAlertSender(),
        recipient="ops@example.com",
        from_address="noreply@example.com",
    )


async def handle_and_drain(pipeline: ErrorPipeline, failure: Failure) -> PipelineResponse:
    response = await pipeline.handle(failure)
    await pipeline.drain()
    return response


class TestPipelineConstruction:
    def test_standard_stage_order(self) -> None:
        pipeline = build_pipeline(MemoryErrorLog())
        assert [type(stage) for stage in pipeline.stages] == [
            LoggingStage,
            AlertingStage,
            ClassificationStage,
            DefaultStage,
        ]

    def test_rejects_non_terminal_last_stage(self) -> None:
        with pytest.raises(ValueError):
            ErrorPipeline([LoggingStage(MemoryErrorLog()), ClassificationStage()])

    def test_rejects_empty_stage_list(self) -> None:
        with pytest.raises(ValueError):
            ErrorPipeline([])


class TestPipelineOrdering:
    def test_stages_run_in_order_with_same_failure(self) -> None:
        calls: list[tuple[str, Failure]] = []
        pipeline = ErrorPipeline(
            [SpyStage("first", calls), SpyStage("second", calls), DefaultStage()]
        )

        response = asyncio.run(pipeline.handle(SERVER_FAULT))

        assert [name for name, _ in calls] == ["first", "second"]
        assert all(failure is SERVER_FAULT for _, failure in calls)
        assert response.status_code == 500

    def test_terminating_stage_stops_chain(self) -> None:
        calls: list[tuple[str, Failure]] = []
        pipeline = ErrorPipeline(
            [ClassificationStage(), SpyStage("after", calls), DefaultStage()]
        )

        response = asyncio.run(pipeline.handle(NOT_FOUND))

        assert response.status_code == 404
        assert calls == []


class TestStatusMapping:
    """A NOT_FOUND failure always yields 404, anything else 500."""

    def test_not_found_yields_404_with_message(self) -> None:
        response = asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog()), NOT_FOUND))
        assert response == PipelineResponse(404, "Page not found on this path: /nope")

    def test_unclassified_yields_500_with_message(self) -> None:
        response = asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog()), SERVER_FAULT))
        assert response == PipelineResponse(500, "synchronous error")

    def test_empty_not_found_message_uses_fallback(self) -> None:
        failure = Failure(FailureKind.NOT_FOUND, "404", "")
        response = asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog()), failure))
        assert response == PipelineResponse(404, NOT_FOUND_FALLBACK)

    def test_empty_server_message_uses_fallback(self) -> None:
        failure = Failure(FailureKind.UNCLASSIFIED, "RuntimeError", "")
        response = asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog()), failure))
        assert response == PipelineResponse(500, SERVER_ERROR_FALLBACK)

    def test_response_never_contains_stack(self) -> None:
        failure = Failure(FailureKind.UNCLASSIFIED, "RuntimeError", "boom", "Traceback: secret")
        response = asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog()), failure))
        assert "Traceback" not in response.body


class TestLoggingStage:
    @pytest.mark.parametrize("failure", [NOT_FOUND, SERVER_FAULT])
    def test_exactly_one_entry_per_failure(self, failure: Failure) -> None:
        error_log = MemoryErrorLog()
        asyncio.run(handle_and_drain(build_pipeline(error_log), failure))
        assert len(error_log.entries) == 1
        assert json.loads(error_log.entries[0])["message"] == failure.message

    def test_always_forwards(self) -> None:
        assert asyncio.run(LoggingStage(MemoryErrorLog()).handle(NOT_FOUND)) is None

    def test_write_errors_propagate(self) -> None:
        class BrokenLog:
            def append(self, entry: str) -> None:
                raise OSError("disk full")

        with pytest.raises(OSError):
            asyncio.run(LoggingStage(BrokenLog()).handle(SERVER_FAULT))


class TestAlertingStage:
    def test_builds_alert_from_failure(self) -> None:
        stage = AlertingStage(RecordingAlertSender(), "ops@example.com", "noreply@example.com")
        message = stage.build_message(SERVER_FAULT)

        assert message.to == "ops@example.com"
        assert message.sender == "noreply@example.com"
        assert message.subject == "You Experienced an Error"
        summary, details = message.text.split("\n", 1)
        assert summary == "synchronous error"
        assert json.loads(details) == SERVER_FAULT.describe()

    def test_empty_message_uses_fallback(self) -> None:
        stage = AlertingStage(RecordingAlertSender(), "ops@example.com", "noreply@example.com")
        message = stage.build_message(Failure(FailureKind.UNCLASSIFIED, "E", ""))
        assert message.text.startswith(ALERT_FALLBACK)

    def test_html_is_escaped(self) -> None:
        stage = AlertingStage(RecordingAlertSender(), "ops@example.com", "noreply@example.com")
        message = stage.build_message(Failure(FailureKind.UNCLASSIFIED, "E", "<script>"))
        assert "<script>" not in message.html
        assert "&lt;script&gt;" in message.html

    def test_one_alert_per_failure(self) -> None:
        sender = RecordingAlertSender()
        asyncio.run(handle_and_drain(build_pipeline(MemoryErrorLog(), sender), SERVER_FAULT))
        assert len(sender.sent) == 1
        assert sender.sent[0].text.startswith("synchronous error")

    def test_forwards_before_delivery_completes(self) -> None:
        async def scenario() -> None:
            sender = BlockingAlertSender()
            stage = AlertingStage(sender, "ops@example.com", "noreply@example.com")

            assert await stage.handle(SERVER_FAULT) is None
            await asyncio.sleep(0)
            assert stage.pending == 1
            assert sender.delivered == []

            sender.release.set()
            await stage.drain()
            assert stage.pending == 0
            assert len(sender.delivered) == 1

        asyncio.run(scenario())

    def test_delivery_failure_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        sender = RecordingAlertSender(error=ConnectionError("smtp down"))
        pipeline = build_pipeline(MemoryErrorLog(), sender)

        with caplog.at_level(logging.ERROR, logger="src.domain.pipeline"):
            response = asyncio.run(handle_and_drain(pipeline, SERVER_FAULT))

        assert response == PipelineResponse(500, "synchronous error")
        assert "Alert delivery failed" in caplog.text
        assert "smtp down" in caplog.text


class TestClassificationStage:
    def test_forwards_unclassified(self) -> None:
        assert asyncio.run(ClassificationStage().handle(SERVER_FAULT)) is None
