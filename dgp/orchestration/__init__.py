"""Grading orchestration."""
from dgp.orchestration.grading_orchestrator import GradingOrchestrator, SubmitResult
