"""Pytest configuration and shared fixtures."""
import asyncio
from typing import List, Optional

import pytest

from dgp.agents.grader import GradingVerdict
from dgp.exceptions import SentenceGenerationError
from dgp.models.stages import Difficulty, Stage


# ---------------------------------------------------------------------------
# Scripted collaborators
# ---------------------------------------------------------------------------

class ScriptedSentenceSource:
    """
    Sentence source double.

    Serves `scripted` sentences first, then numbered ones tagged with the
    requested difficulty. Set `gate` to hold every call until it is set,
    and `fail` to raise SentenceGenerationError.
    """

    def __init__(self, scripted: Optional[List[str]] = None, fail: bool = False):
        self.scripted = list(scripted or [])
        self.fail = fail
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[tuple] = []
        self._counter = 0

    async def generate_batch(self, difficulty: Difficulty, count: int, session_id: str = "pool") -> List[str]:
        self.calls.append((difficulty, count))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise SentenceGenerationError(difficulty.value, "scripted failure")
        batch = []
        while len(batch) < count:
            if self.scripted:
                batch.append(self.scripted.pop(0))
            else:
                self._counter += 1
                batch.append(f"{difficulty.value.lower()} sentence number {self._counter}")
        return batch


class ScriptedGrader:
    """Grader double returning queued verdicts (correct by default)."""

    agent_name = "grader"
    model_id = "scripted-grader"

    def __init__(self, verdicts: Optional[list] = None):
        self.verdicts = list(verdicts or [])
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None
        self.last_prompt: Optional[str] = None

    async def grade(self, stage: Stage, sentence: str, work: dict, session_id: str = "anonymous") -> GradingVerdict:
        self.calls.append((stage, sentence, work))
        self.last_prompt = f"grade {stage.value}: {sentence}"
        if self.gate is not None:
            await self.gate.wait()
        verdict = self.verdicts.pop(0) if self.verdicts else GradingVerdict(is_correct=True, feedback="Correct!")
        if isinstance(verdict, Exception):
            raise verdict
        return verdict


class FakeAudio:
    """Ambient audio double; returns None for everything when `fail` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.track_requests: List[Stage] = []
        self.sfx_requests: List[str] = []

    async def generate_track(self, stage: Stage) -> Optional[str]:
        self.track_requests.append(stage)
        return None if self.fail else f"track-{stage.value.lower()}"

    async def generate_sfx(self, kind: str) -> Optional[str]:
        self.sfx_requests.append(kind)
        return None if self.fail else f"sfx-{kind}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sentence_source():
    return ScriptedSentenceSource()


@pytest.fixture
def grader():
    return ScriptedGrader()


@pytest.fixture
def fake_audio():
    return FakeAudio()


@pytest.fixture(autouse=True)
def _reset_settings():
    """Keep cached settings from leaking between tests."""
    from config import reset_settings
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_source():
    """Factory for sentence sources with scripted sentences or failures."""
    return ScriptedSentenceSource


@pytest.fixture
def make_grader():
    """Factory for graders with queued verdicts (GradingVerdict or exception)."""
    return ScriptedGrader
