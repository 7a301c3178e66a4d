"""Practice models."""
from dgp.models.stages import Stage, Difficulty, STAGE_ORDER, next_stage
from dgp.models.stage_work import (
    WordTag,
    MondayWork,
    TuesdayWork,
    WednesdayWork,
    ThursdayWork,
    DiagramSlot,
    FridayWork,
    StageHistory,
)
from dgp.models.stage_machine import StageMachine
from dgp.models.session_state import SessionState, SessionSnapshot
from dgp.models.grading_logs import GradingLogEntry, GradingLogStore, get_grading_log_store
