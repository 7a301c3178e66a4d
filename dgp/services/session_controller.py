"""
Session Controller

Single owner of one practice session. Turns user input events into work
mutations, hands submissions to the Grading Orchestrator and exposes a
read-only snapshot for rendering.
"""

import logging
from typing import Optional

from dgp.agents.audio import AmbientAudioSource
from dgp.agents.grader import GraderAgent
from dgp.models.session_state import SessionSnapshot, SessionState, WELCOME_FEEDBACK
from dgp.models.stage_work import (
    PartOfSpeech,
    SentencePurpose,
    SentenceType,
    SlotId,
    TuesdayCategory,
)
from dgp.models.stages import Difficulty, Stage
from dgp.orchestration.grading_orchestrator import GradingOrchestrator, SubmitResult
from dgp.pool.sentence_pool import SentencePool, SentenceSource

logger = logging.getLogger("dgp.session_controller")


class SessionController:
    """Coordinates state, pool and orchestrator for one session."""

    def __init__(
        self,
        source: SentenceSource,
        grader: GraderAgent,
        audio: Optional[AmbientAudioSource] = None,
        difficulty: Difficulty = Difficulty.EASY,
        batch_size: int = 5,
        low_water_mark: int = 2,
        advance_delay_seconds: float = 2.5,
        state: Optional[SessionState] = None,
    ):
        self.state = state or SessionState(difficulty=difficulty)
        self.pool = SentencePool(
            source,
            difficulty=self.state.difficulty,
            batch_size=batch_size,
            low_water_mark=low_water_mark,
        )
        self.audio = audio
        self.orchestrator = GradingOrchestrator(
            grader,
            self.pool,
            audio=audio,
            advance_delay_seconds=advance_delay_seconds,
        )

    @property
    def session_id(self) -> str:
        return self.state.session_id

    async def start(self) -> SessionSnapshot:
        """Load the first sentence for the current difficulty."""
        self.state.is_loading = True
        sentence = await self.pool.draw()
        self.state.start_sentence(sentence)
        self.state.is_loading = False
        logger.info(
            f"Session {self.session_id} started at {self.state.difficulty.value}: '{sentence}'"
        )
        self.orchestrator.request_track(self.state, Stage.MONDAY)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Monday
    # ------------------------------------------------------------------

    def tag_word(self, word_index: int, pos: PartOfSpeech) -> None:
        self.state.history.monday.set_part_of_speech(word_index, pos)
        self.state.touch()

    def clear_tag(self, word_index: int) -> None:
        self.state.history.monday.clear_tag(word_index)
        self.state.touch()

    def set_sub_type(self, word_index: int, sub_type: str) -> bool:
        accepted = self.state.history.monday.set_sub_type(word_index, sub_type)
        if accepted:
            self.state.touch()
        return accepted

    # ------------------------------------------------------------------
    # Tuesday / Wednesday / Thursday
    # ------------------------------------------------------------------

    def toggle_tuesday(self, category: TuesdayCategory, word_index: int) -> bool:
        member = self.state.history.tuesday.toggle_index(category, word_index)
        self.state.touch()
        return member

    def set_clause_count(self, count: int) -> None:
        self.state.history.wednesday.set_clause_count(count)
        self.state.touch()

    def set_sentence_type(self, sentence_type: SentenceType) -> None:
        self.state.history.wednesday.set_sentence_type(sentence_type)
        self.state.touch()

    def set_sentence_purpose(self, purpose: SentencePurpose) -> None:
        self.state.history.wednesday.set_sentence_purpose(purpose)
        self.state.touch()

    def set_corrected_text(self, text: str) -> None:
        self.state.history.thursday.set_corrected_text(text)
        self.state.touch()

    # ------------------------------------------------------------------
    # Friday
    # ------------------------------------------------------------------

    def select_word(self, word_index: Optional[int]) -> None:
        """Pick a word token for the next slot click (None deselects)."""
        self.state.selected_word_index = word_index
        if word_index is not None:
            self.state.sfx_cue = "select"
        self.state.touch()

    def click_slot(self, slot_id: SlotId) -> None:
        """Drop the selected word into a slot, or rotate the slot when nothing is selected."""
        friday = self.state.history.friday
        if self.state.selected_word_index is not None:
            friday.assign_slot(slot_id, self.state.selected_word_index)
            self.state.selected_word_index = None
        else:
            friday.toggle_rotation(slot_id)
        self.state.touch()

    def toggle_rotation(self, slot_id: SlotId) -> None:
        self.state.history.friday.toggle_rotation(slot_id)
        self.state.touch()

    def reset_friday(self) -> None:
        self.state.history.friday.reset()
        self.state.selected_word_index = None
        self.state.touch()

    # ------------------------------------------------------------------
    # Grading, difficulty, audio
    # ------------------------------------------------------------------

    async def submit(self) -> SubmitResult:
        return await self.orchestrator.submit(self.state)

    async def change_difficulty(self, difficulty: Difficulty) -> SessionSnapshot:
        """Discard the pool and all progress, then load a sentence at *difficulty*."""
        # Block submissions until the new sentence is in place
        self.state.is_loading = True
        self.state.touch()
        logger.info(
            f"Session {self.session_id} difficulty {self.state.difficulty.value} -> {difficulty.value}"
        )
        self.orchestrator.close()
        await self.pool.reset(difficulty)
        self.state.difficulty = difficulty
        self.state.feedback = WELCOME_FEEDBACK
        self.state.sfx_cue = None
        return await self.start()

    def toggle_music(self) -> bool:
        self.state.music_enabled = not self.state.music_enabled
        self.state.touch()
        return self.state.music_enabled

    @property
    def ambient_track(self) -> Optional[str]:
        return self.state.ambient_track

    def snapshot(self) -> SessionSnapshot:
        return self.state.to_snapshot(pool_size=len(self.pool))

    async def close(self) -> None:
        self.orchestrator.close()
        self.pool.close()
