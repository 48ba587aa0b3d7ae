"""Coaching session simulator core."""
from .case_generator import SessionCaseGenerator
from .client import TrainerClient
from .errors import BusyError, ServiceError, StateError, TrainerError, ValidationError
from .orchestrator import ConversationOrchestrator
from .session import Phase, SessionSnapshot, TrainerSession
from .stage_policy import MESSAGES_PER_STAGE, next_stage
from .stages import STAGES, TOTAL_STAGES, StageInfo, stage_at
from .submission import (
    AISessionTrainerSubmission,
    AITrainerSubmission,
    AnalysisSubmission,
    QuestionAnswerSubmission,
    Submission,
    SubmissionRecord,
    build,
)
from .types import AssignmentRef, ConversationState, Message, SessionCase

__all__ = [
    "SessionCaseGenerator",
    "TrainerClient",
    "BusyError",
    "ServiceError",
    "StateError",
    "TrainerError",
    "ValidationError",
    "ConversationOrchestrator",
    "Phase",
    "SessionSnapshot",
    "TrainerSession",
    "MESSAGES_PER_STAGE",
    "next_stage",
    "STAGES",
    "TOTAL_STAGES",
    "StageInfo",
    "stage_at",
    "AISessionTrainerSubmission",
    "AITrainerSubmission",
    "AnalysisSubmission",
    "QuestionAnswerSubmission",
    "Submission",
    "SubmissionRecord",
    "build",
    "AssignmentRef",
    "ConversationState",
    "Message",
    "SessionCase",
]
