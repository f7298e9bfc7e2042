"""
Tests for the job lifecycle controller.

The generation backend is replaced by an httpx.MockTransport that plays back
a scripted sequence of status responses.
"""
import asyncio
import json
from typing import List, Optional

import httpx
import pytest

from conftest import make_interview
from interview_generator.client.api import InterviewApiClient
from interview_generator.client.jobs import JobLifecycleController, JobPhase
from interview_generator.core.constants import (
    INTERVIEW_STATUS_ENDPOINT,
    START_INTERVIEWS_ENDPOINT,
    SUCCESS_TITLE,
)
from interview_generator.schemas.interview import JobStatus

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """Scripted generation backend; the last status repeats once the script runs out."""

    def __init__(self, statuses: List, start_response: Optional[httpx.Response] = None, delay: float = 0.0):
        self.statuses = list(statuses)
        self.start_response = start_response
        self.delay = delay
        self.start_calls = 0
        self.status_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == START_INTERVIEWS_ENDPOINT:
            self.start_calls += 1
            return self.start_response or httpx.Response(200, json={"jobId": "job-1"})

        if request.url.path == f"{INTERVIEW_STATUS_ENDPOINT}/job-1":
            self.status_calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await asyncio.sleep(self.delay)
            finally:
                self.in_flight -= 1
            item = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            return item if isinstance(item, httpx.Response) else httpx.Response(200, json=item)

        return httpx.Response(404, json={"error": "not found"})


def make_controller(backend, state, sink, poll_interval=0.0, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    api = InterviewApiClient(http, app_url="http://app.test", api_url=BACKEND_URL)
    return JobLifecycleController(
        api, state, sink, poll_interval=poll_interval, development_mode=kwargs.pop("development_mode", False), **kwargs
    )


# ============================================================
# TERMINAL TRANSITIONS
# ============================================================

class TestTerminalTransitions:

    @pytest.mark.asyncio
    async def test_pending_then_completed(self, state, sink):
        i1, i2 = make_interview("PM"), make_interview("QA", prefix="q-")
        backend = FakeBackend([
            {"status": "pending", "progress": 10},
            {"status": "pending", "progress": 55},
            {"status": "completed", "data": [i1.model_dump(), i2.model_dump()]},
        ])
        controller = make_controller(backend, state, sink)

        controller.start("cs_paid")
        assert state.interviewing is True
        phase = await controller.wait()

        assert phase == JobPhase.COMPLETED
        assert state.interviews == [i1, i2]
        assert state.interviewing is False
        assert controller.job_id is None
        assert len(sink.notifications) == 1
        assert sink.successes[0].title == SUCCESS_TITLE
        assert backend.status_calls == 3

    @pytest.mark.asyncio
    async def test_pending_then_failed(self, state, sink):
        existing = [make_interview("Existing")]
        state.set_interviews(existing)
        backend = FakeBackend([
            {"status": "pending", "progress": 0},
            {"status": "failed", "error": "quota exceeded"},
        ])
        controller = make_controller(backend, state, sink)

        controller.start("cs_paid")
        phase = await controller.wait()

        assert phase == JobPhase.FAILED
        assert state.interviewing is False
        assert state.interviews == existing
        assert len(sink.notifications) == 1
        assert sink.errors[0].description == "quota exceeded"

    @pytest.mark.asyncio
    async def test_completed_without_data_clears_interviews(self, state, sink):
        state.set_interviews([make_interview()])
        controller = make_controller(FakeBackend([{"status": "completed"}]), state, sink)

        controller.start("cs_paid")
        await controller.wait()

        assert state.interviews == []
        assert len(sink.successes) == 1

    @pytest.mark.asyncio
    async def test_progress_is_tracked_while_pending(self, state, sink):
        backend = FakeBackend([{"status": "pending", "progress": 40}])
        controller = make_controller(backend, state, sink, poll_interval=10.0)

        controller.start("cs_paid")
        for _ in range(200):
            await asyncio.sleep(0.001)
            if controller.progress:
                break

        assert controller.phase == JobPhase.PENDING
        assert controller.progress == 40
        assert controller.job_id == "job-1"
        await controller.close()

    @pytest.mark.parametrize("status, terminal", [
        ("pending", False),
        ("completed", True),
        ("failed", True),
    ])
    def test_terminal_statuses(self, status, terminal):
        assert JobStatus(status=status).is_terminal is terminal


# ============================================================
# ERROR PATHS
# ============================================================

class TestErrors:

    @pytest.mark.asyncio
    async def test_start_error_uses_server_message(self, state, sink):
        backend = FakeBackend([], start_response=httpx.Response(402, json={"message": "Session not paid"}))
        controller = make_controller(backend, state, sink)

        controller.start("cs_unpaid")
        phase = await controller.wait()

        assert phase == JobPhase.FAILED
        assert state.interviewing is False
        assert backend.status_calls == 0
        assert [n.description for n in sink.errors] == ["Session not paid"]

    @pytest.mark.asyncio
    async def test_start_error_without_body_uses_fallback(self, state, sink):
        backend = FakeBackend([], start_response=httpx.Response(500, text="oops"))
        controller = make_controller(backend, state, sink)

        controller.start("cs_paid")
        await controller.wait()

        assert sink.errors[0].description == "Failed to start interview generation"

    @pytest.mark.asyncio
    async def test_status_http_error(self, state, sink):
        backend = FakeBackend([
            {"status": "pending", "progress": 5},
            httpx.Response(404, json={"error": "Job not found"}),
        ])
        controller = make_controller(backend, state, sink)

        controller.start("cs_paid")
        await controller.wait()

        assert controller.phase == JobPhase.FAILED
        assert controller.job_id is None
        assert [n.description for n in sink.errors] == ["Job not found"]

    @pytest.mark.asyncio
    async def test_unparseable_status(self, state, sink):
        backend = FakeBackend([httpx.Response(200, json={"status": "exploded"})])
        controller = make_controller(backend, state, sink)

        controller.start("cs_paid")
        await controller.wait()

        assert controller.phase == JobPhase.FAILED
        assert len(sink.errors) == 1
        assert "Invalid job status response" in sink.errors[0].description


# ============================================================
# START GUARD & CONCURRENCY
# ============================================================

class TestStartGuard:

    @pytest.mark.asyncio
    async def test_same_token_starts_one_job(self, state, sink):
        backend = FakeBackend([{"status": "completed", "data": []}])
        controller = make_controller(backend, state, sink)

        first = controller.start("cs_paid")
        second = controller.start("cs_paid")
        await controller.wait()
        third = controller.start("cs_paid")

        assert first is not None
        assert second is None and third is None
        assert backend.start_calls == 1
        assert len(sink.notifications) == 1

    @pytest.mark.asyncio
    async def test_start_marks_interviewing_immediately(self, state, sink):
        controller = make_controller(FakeBackend([{"status": "completed", "data": []}]), state, sink)

        controller.start("cs_paid")

        assert (state.interviewing, controller.phase) == (True, JobPhase.STARTING)
        await controller.wait()
        assert state.interviewing is False

    @pytest.mark.asyncio
    async def test_new_token_replaces_tracked_job(self, state, sink):
        status_calls = {"job-cs_a": 0, "job-cs_b": 0}

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == START_INTERVIEWS_ENDPOINT:
                session_id = json.loads(request.content)["sessionId"]
                return httpx.Response(200, json={"jobId": f"job-{session_id}"})
            job_id = request.url.path.rsplit("/", 1)[-1]
            status_calls[job_id] += 1
            if job_id == "job-cs_a":
                return httpx.Response(200, json={"status": "pending", "progress": 10})
            return httpx.Response(200, json={"status": "completed", "data": [make_interview("B").model_dump()]})

        controller = make_controller(handler, state, sink, poll_interval=0.005)

        first = controller.start("cs_a")
        for _ in range(200):
            await asyncio.sleep(0.001)
            if status_calls["job-cs_a"]:
                break
        second = controller.start("cs_b")
        await controller.wait()
        calls_after_replace = status_calls["job-cs_a"]
        await asyncio.sleep(0.02)

        assert first.cancelled()
        assert second.done() and not second.cancelled()
        assert status_calls["job-cs_a"] == calls_after_replace
        assert status_calls["job-cs_b"] == 1
        assert len(sink.notifications) == 1
        assert sink.successes[0].title == SUCCESS_TITLE
        assert [i.role for i in state.interviews] == ["B"]

    @pytest.mark.asyncio
    async def test_missing_token_does_nothing(self, state, sink):
        backend = FakeBackend([{"status": "completed"}])
        controller = make_controller(backend, state, sink)

        assert controller.start(None) is None
        assert controller.start("") is None
        assert controller.phase == JobPhase.IDLE
        assert backend.start_calls == 0

    @pytest.mark.asyncio
    async def test_polls_are_sequential(self, state, sink):
        backend = FakeBackend(
            [{"status": "pending", "progress": p} for p in (10, 20, 30)] + [{"status": "completed", "data": []}],
            delay=0.01,
        )
        controller = make_controller(backend, state, sink, poll_interval=0.001)

        controller.start("cs_paid")
        await controller.wait()

        assert backend.status_calls == 4
        assert backend.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_development_mode_loads_samples(self, state, sink):
        samples = [make_interview("Sample")]
        backend = FakeBackend([{"status": "completed"}])
        controller = make_controller(backend, state, sink, development_mode=True, sample_interviews=samples)

        assert controller.start("cs_dev") is None

        assert state.interviews == samples
        assert controller.phase == JobPhase.COMPLETED
        assert backend.start_calls == 0


# ============================================================
# TEARDOWN
# ============================================================

class TestTeardown:

    @pytest.mark.asyncio
    async def test_close_stops_polling_without_mutation(self, state, sink):
        backend = FakeBackend([{"status": "pending", "progress": 50}])
        controller = make_controller(backend, state, sink, poll_interval=0.005)

        task = controller.start("cs_paid")
        await asyncio.sleep(0.03)
        await controller.close()
        calls_at_close = backend.status_calls
        await asyncio.sleep(0.03)

        assert task.cancelled()
        assert backend.status_calls == calls_at_close
        assert sink.notifications == []
        assert state.interviews == []

    @pytest.mark.asyncio
    async def test_start_after_close_is_refused(self, state, sink):
        controller = make_controller(FakeBackend([{"status": "completed"}]), state, sink)
        await controller.close()

        with pytest.raises(RuntimeError):
            controller.start("cs_paid")

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, state, sink):
        backend = FakeBackend([{"status": "pending", "progress": 1}])
        async with make_controller(backend, state, sink, poll_interval=60.0) as controller:
            task = controller.start("cs_paid")
            await asyncio.sleep(0.01)

        assert task.cancelled()
        assert not controller.active
