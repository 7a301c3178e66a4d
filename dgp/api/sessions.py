"""Practice session API endpoints."""
import logging
from typing import Annotated, Literal, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from shared.utils.exceptions import (
    DigitalDGPException,
    LLMProviderException,
    SubmissionInProgressException,
)
from dgp.exceptions import SubmissionInProgressError
from dgp.models.grading_logs import GradingLogEntry, get_grading_log_store
from dgp.models.session_state import SessionSnapshot, SfxKind
from dgp.models.stage_work import (
    PartOfSpeech,
    SentencePurpose,
    SentenceType,
    SlotId,
    TuesdayCategory,
)
from dgp.models.stages import Difficulty
from dgp.orchestration.grading_orchestrator import SubmitResult
from dgp.services.session_controller import SessionController
from dgp.services.session_registry import SessionRegistry, get_session_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])
sfx_router = APIRouter(prefix="/sfx", tags=["audio"])


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    difficulty: Optional[Difficulty] = None


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class TagWord(BaseModel):
    action: Literal["tag_word"]
    word_index: int = Field(ge=0)
    part_of_speech: PartOfSpeech


class ClearTag(BaseModel):
    action: Literal["clear_tag"]
    word_index: int = Field(ge=0)


class SetSubType(BaseModel):
    action: Literal["set_sub_type"]
    word_index: int = Field(ge=0)
    sub_type: str


class ToggleTuesday(BaseModel):
    action: Literal["toggle_tuesday"]
    category: TuesdayCategory
    word_index: int = Field(ge=0)


class SetClauseCount(BaseModel):
    action: Literal["set_clause_count"]
    count: int


class SetSentenceType(BaseModel):
    action: Literal["set_sentence_type"]
    sentence_type: SentenceType


class SetSentencePurpose(BaseModel):
    action: Literal["set_sentence_purpose"]
    sentence_purpose: SentencePurpose


class SetCorrectedText(BaseModel):
    action: Literal["set_corrected_text"]
    text: str


class SelectWord(BaseModel):
    action: Literal["select_word"]
    word_index: Optional[int] = Field(default=None, ge=0)


class ClickSlot(BaseModel):
    action: Literal["click_slot"]
    slot_id: SlotId


class ToggleRotation(BaseModel):
    action: Literal["toggle_rotation"]
    slot_id: SlotId


class ResetFriday(BaseModel):
    action: Literal["reset_friday"]


WorkEdit = Annotated[
    Union[
        TagWord, ClearTag, SetSubType, ToggleTuesday, SetClauseCount,
        SetSentenceType, SetSentencePurpose, SetCorrectedText,
        SelectWord, ClickSlot, ToggleRotation, ResetFriday,
    ],
    Field(discriminator="action"),
]


class WorkEditRequest(BaseModel):
    edit: WorkEdit


class WorkEditResponse(BaseModel):
    applied: bool
    session: SessionSnapshot


class SubmitResponse(BaseModel):
    result: SubmitResult
    session: SessionSnapshot


class TrackResponse(BaseModel):
    session_id: str
    stage: str
    music_enabled: bool
    track: Optional[str] = None


class SfxResponse(BaseModel):
    kind: SfxKind
    audio: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_controller(registry: SessionRegistry, session_id: str) -> SessionController:
    try:
        return registry.get(session_id)
    except DigitalDGPException as e:
        raise e.to_http_exception()


def _check_word_index(controller: SessionController, word_index: Optional[int]) -> None:
    if word_index is None:
        return
    word_count = len(controller.state.words)
    if word_index >= word_count:
        raise HTTPException(
            status_code=422,
            detail=f"word_index {word_index} out of range for a {word_count}-word sentence",
        )


def apply_work_edit(controller: SessionController, edit: WorkEdit) -> bool:
    """Route one edit to the controller. Returns False when the edit was rejected."""
    _check_word_index(controller, getattr(edit, "word_index", None))

    if isinstance(edit, TagWord):
        controller.tag_word(edit.word_index, edit.part_of_speech)
    elif isinstance(edit, ClearTag):
        controller.clear_tag(edit.word_index)
    elif isinstance(edit, SetSubType):
        return controller.set_sub_type(edit.word_index, edit.sub_type)
    elif isinstance(edit, ToggleTuesday):
        controller.toggle_tuesday(edit.category, edit.word_index)
    elif isinstance(edit, SetClauseCount):
        controller.set_clause_count(edit.count)
    elif isinstance(edit, SetSentenceType):
        controller.set_sentence_type(edit.sentence_type)
    elif isinstance(edit, SetSentencePurpose):
        controller.set_sentence_purpose(edit.sentence_purpose)
    elif isinstance(edit, SetCorrectedText):
        controller.set_corrected_text(edit.text)
    elif isinstance(edit, SelectWord):
        controller.select_word(edit.word_index)
    elif isinstance(edit, ClickSlot):
        controller.click_slot(edit.slot_id)
    elif isinstance(edit, ToggleRotation):
        controller.toggle_rotation(edit.slot_id)
    elif isinstance(edit, ResetFriday):
        controller.reset_friday()
    return True


# ---------------------------------------------------------------------------
# Session endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=SessionSnapshot)
async def create_session(
    request: CreateSessionRequest,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Create a practice session and load its first sentence."""
    controller = await registry.create(request.difficulty)
    logger.info(f"Created session {controller.session_id}")
    return controller.snapshot()


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Current read-only view of a session."""
    return _get_controller(registry, session_id).snapshot()


@router.post("/{session_id}/work", response_model=WorkEditResponse)
async def edit_work(
    session_id: str,
    request: WorkEditRequest,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Apply one edit to the per-stage work."""
    controller = _get_controller(registry, session_id)
    applied = apply_work_edit(controller, request.edit)
    return WorkEditResponse(applied=applied, session=controller.snapshot())


@router.post("/{session_id}/submit", response_model=SubmitResponse)
async def submit_stage(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Grade the current stage's work."""
    controller = _get_controller(registry, session_id)
    try:
        result = await controller.submit()
    except SubmissionInProgressError:
        raise SubmissionInProgressException(session_id).to_http_exception()
    return SubmitResponse(result=result, session=controller.snapshot())


@router.post("/{session_id}/difficulty", response_model=SessionSnapshot)
async def change_difficulty(
    session_id: str,
    request: DifficultyRequest,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Switch difficulty; discards the pool and all progress."""
    controller = _get_controller(registry, session_id)
    return await controller.change_difficulty(request.difficulty)


@router.post("/{session_id}/music", response_model=SessionSnapshot)
async def toggle_music(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Toggle ambient music on or off."""
    controller = _get_controller(registry, session_id)
    controller.toggle_music()
    return controller.snapshot()


@router.get("/{session_id}/track", response_model=TrackResponse)
async def get_track(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Ambient track for the current stage (null until generated)."""
    controller = _get_controller(registry, session_id)
    state = controller.state
    return TrackResponse(
        session_id=session_id,
        stage=state.current_stage.value,
        music_enabled=state.music_enabled,
        track=controller.ambient_track,
    )


@router.get("/{session_id}/logs", response_model=list[GradingLogEntry])
async def get_logs(
    session_id: str,
    stage: Optional[str] = None,
    agent_name: Optional[str] = None,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Grading and orchestration events for a session."""
    _get_controller(registry, session_id)
    return get_grading_log_store().get_logs(session_id, stage=stage, agent_name=agent_name)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Drop a session and its logs."""
    try:
        await registry.delete(session_id)
    except DigitalDGPException as e:
        raise e.to_http_exception()
    return {"status": "deleted", "session_id": session_id}


# ---------------------------------------------------------------------------
# Sound effects
# ---------------------------------------------------------------------------

@sfx_router.get("/{kind}", response_model=SfxResponse)
async def get_sfx(
    kind: SfxKind,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Sound-effect payload for select/success/error cues."""
    payload = None
    if registry.audio is not None:
        payload = await registry.audio.generate_sfx(kind)
    if payload is None:
        raise LLMProviderException(f"Sound effect '{kind}' unavailable").to_http_exception()
    return SfxResponse(kind=kind, audio=payload)
