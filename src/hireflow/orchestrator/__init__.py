"""
Orchestrator module for the end of an interview.
"""

from hireflow.orchestrator.session_finalizer import SessionFinalizer

__all__ = ["SessionFinalizer"]
