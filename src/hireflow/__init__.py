"""
HireFlow: AI-driven technical interview backend.

Resume ingestion, retrieval-augmented interview turns, and transcript
evaluation with persisted interview reports.
"""

__version__ = "0.1.0"
