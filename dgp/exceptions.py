"""
Custom Exception Hierarchy for the Practice Module

Exception Hierarchy:
    PracticeError (base)
    ├── AgentError
    │   ├── AgentExecutionError
    │   └── AgentOutputError
    ├── SentenceGenerationError
    ├── GradingError
    ├── StateError
    │   ├── StateTransitionError
    │   └── SubmissionInProgressError
    ├── PromptError
    │   └── PromptTemplateError
    └── ConfigurationError
"""

from typing import Optional


class PracticeError(Exception):
    """Base exception for all practice errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Agent Errors

class AgentError(PracticeError):
    """Base exception for agent-related errors."""

    def __init__(self, agent_name: str, message: str, details: Optional[dict] = None):
        formatted_message = f"[{agent_name}] {message}"
        super().__init__(formatted_message, details)
        self.agent_name = agent_name


class AgentExecutionError(AgentError):
    """Raised when agent execution fails."""
    pass


class AgentOutputError(AgentError):
    """Raised when agent output is invalid or malformed."""

    def __init__(self, agent_name: str, expected_schema: Optional[str] = None):
        message = "Invalid or malformed output"
        if expected_schema:
            message += f" (expected schema: {expected_schema})"
        super().__init__(agent_name, message)
        self.expected_schema = expected_schema


# Collaborator Errors

class SentenceGenerationError(PracticeError):
    """Raised when the sentence source cannot produce a usable batch."""

    def __init__(self, difficulty: str, reason: str):
        super().__init__(f"Sentence generation failed at {difficulty}: {reason}")
        self.difficulty = difficulty
        self.reason = reason


class GradingError(PracticeError):
    """Raised when the grader call fails in transport or returns garbage."""

    def __init__(self, stage: str, reason: str):
        super().__init__(f"Grading failed for {stage}: {reason}")
        self.stage = stage
        self.reason = reason


# State Errors

class StateError(PracticeError):
    """Base exception for state management errors."""
    pass


class StateTransitionError(StateError):
    """Raised when state transition is invalid."""

    def __init__(self, from_state: str, to_state: str, reason: str):
        message = f"Invalid state transition from '{from_state}' to '{to_state}': {reason}"
        super().__init__(message)
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason


class SubmissionInProgressError(StateError):
    """Raised when a stage is submitted while the session is still busy."""

    def __init__(self, session_id: str):
        super().__init__(f"Submission already in progress for session {session_id}")
        self.session_id = session_id


# Prompt Errors

class PromptError(PracticeError):
    """Base exception for prompt-related errors."""
    pass


class PromptTemplateError(PromptError):
    """Raised when prompt template rendering fails."""

    def __init__(self, template_name: str, missing_vars: list[str]):
        message = f"Prompt template '{template_name}' missing variables: {', '.join(missing_vars)}"
        super().__init__(message)
        self.template_name = template_name
        self.missing_vars = missing_vars


# Configuration Errors

class ConfigurationError(PracticeError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, reason: str):
        message = f"Configuration error for '{config_key}': {reason}"
        super().__init__(message)
        self.config_key = config_key
        self.reason = reason
