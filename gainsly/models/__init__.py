"""
Gainsly API - MongoDB Models Package.

Export all Beanie ODM models for MongoDB operations.
"""

from gainsly.models.mongodb import (
    UserDocument,
    ExerciseDocument,
    WorkoutDocument,
    WorkoutSetDocument,
    RefreshTokenDocument,
    DOCUMENT_MODELS,
)

__all__ = [
    "UserDocument",
    "ExerciseDocument",
    "WorkoutDocument",
    "WorkoutSetDocument",
    "RefreshTokenDocument",
    "DOCUMENT_MODELS",
]
