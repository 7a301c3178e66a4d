"""
Session State Models

Everything a practice session tracks: the active sentence, the stage machine,
feedback, loading flag, difficulty and the audio cues the UI plays.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field
import uuid

from dgp.models.stage_machine import StageMachine
from dgp.models.stage_work import StageHistory
from dgp.models.stages import Difficulty, Stage


SfxKind = Literal["select", "success", "error"]

WELCOME_FEEDBACK = "Digital DGP. Grind mode: ON."
CHECKING_FEEDBACK = "CHECKING..."
CONNECTION_LOST_FEEDBACK = "Error. Connection lost."


class SessionState(BaseModel):
    """Complete state for one practice session."""

    # Identification
    session_id: str = Field(
        default_factory=lambda: f"dgp_{uuid.uuid4().hex[:12]}",
        description="Unique session identifier",
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Sentence & Progress
    sentence: str = Field(default="", description="Active sentence: lowercase, no punctuation")
    difficulty: Difficulty = Difficulty.EASY
    machine: StageMachine = Field(default_factory=StageMachine)
    sentences_completed: int = 0

    # Presentation-facing flags
    feedback: str = WELCOME_FEEDBACK
    is_loading: bool = True
    music_enabled: bool = True
    ambient_track: Optional[str] = Field(default=None, description="Base64 audio for the current stage")
    sfx_cue: Optional[SfxKind] = None
    selected_word_index: Optional[int] = Field(
        default=None, description="Friday word picked and waiting for a slot"
    )

    @property
    def words(self) -> list[str]:
        return self.sentence.split() if self.sentence else []

    @property
    def current_stage(self) -> Stage:
        return self.machine.current_stage

    @property
    def completed_stages(self) -> list[Stage]:
        return self.machine.completed_stages

    @property
    def history(self) -> StageHistory:
        return self.machine.history

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def start_sentence(self, sentence: str) -> None:
        """Make *sentence* active and wipe all per-stage work."""
        self.sentence = sentence
        self.machine.reset_for_new_sentence()
        self.selected_word_index = None
        self.touch()

    def to_snapshot(self, pool_size: int = 0) -> "SessionSnapshot":
        words = self.words
        return SessionSnapshot(
            session_id=self.session_id,
            sentence=self.sentence,
            words=words,
            difficulty=self.difficulty,
            current_stage=self.current_stage,
            completed_stages=list(self.completed_stages),
            sentence_complete=self.machine.sentence_complete,
            history=self.history.model_copy(deep=True),
            feedback=self.feedback,
            is_loading=self.is_loading,
            music_enabled=self.music_enabled,
            has_ambient_track=self.ambient_track is not None,
            sfx_cue=self.sfx_cue,
            selected_word_index=self.selected_word_index,
            available_word_indices=self.history.friday.available_word_indices(len(words)),
            sentences_completed=self.sentences_completed,
            pool_size=pool_size,
        )


class SessionSnapshot(BaseModel):
    """Read-only view of a session for rendering."""

    session_id: str
    sentence: str
    words: list[str]
    difficulty: Difficulty
    current_stage: Stage
    completed_stages: list[Stage]
    sentence_complete: bool
    history: StageHistory
    feedback: str
    is_loading: bool
    music_enabled: bool
    has_ambient_track: bool
    sfx_cue: Optional[SfxKind]
    selected_word_index: Optional[int]
    available_word_indices: list[int]
    sentences_completed: int
    pool_size: int
