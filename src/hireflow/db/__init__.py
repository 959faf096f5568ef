"""
Database module for persistence.

Provides SQLAlchemy models, the engine lifecycle and the interview
repository/store.
"""

from hireflow.db.models import Base, InterviewModel
from hireflow.db.repository import InterviewRepository, InterviewStore
from hireflow.db.session import Database

__all__ = [
    "Base",
    "Database",
    "InterviewModel",
    "InterviewRepository",
    "InterviewStore",
]
