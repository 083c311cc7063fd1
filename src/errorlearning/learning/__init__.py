"""Error learning: pattern tracking, escalation and knowledge export.

Public API:
    - ErrorLearningRegistry: log errors, document solutions, read statistics
    - ErrorKind, ErrorEntry, ErrorPattern, SolutionBundle: data model
    - with_error_learning(): opt-in exception wrapper
"""

from __future__ import annotations

from .escalation import EscalationEvent, EscalationTier
from .knowledge import KNOWLEDGE_BASE_CONTENT_TYPE, KNOWLEDGE_BASE_FILENAME, KnowledgeBaseDownload
from .middleware import with_error_learning
from .models import (
    ErrorEntry,
    ErrorKind,
    ErrorPattern,
    ErrorStatistics,
    LearningRule,
    PreventionRule,
    SolutionBundle,
)
from .registry import ErrorLearningRegistry

__all__ = [
    "KNOWLEDGE_BASE_CONTENT_TYPE",
    "KNOWLEDGE_BASE_FILENAME",
    "ErrorEntry",
    "ErrorKind",
    "ErrorLearningRegistry",
    "ErrorPattern",
    "ErrorStatistics",
    "EscalationEvent",
    "EscalationTier",
    "KnowledgeBaseDownload",
    "LearningRule",
    "PreventionRule",
    "SolutionBundle",
    "with_error_learning",
]
