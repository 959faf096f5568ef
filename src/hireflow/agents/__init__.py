"""
Agents module containing the LLM-backed interview roles.

Each agent handles one aspect of the interview: resume parsing,
per-turn questioning, or final evaluation.
"""

from hireflow.agents.evaluator import EvaluationAgent, format_transcript, parse_feedback
from hireflow.agents.interviewer import InterviewerAgent
from hireflow.agents.resume_parser import (
    ResumeParseOutcome,
    ResumeParser,
    ResumeParserBase,
    SkillMatch,
    TailoredQuestion,
    calculate_skill_match,
)

__all__ = [
    "EvaluationAgent",
    "InterviewerAgent",
    "ResumeParseOutcome",
    "ResumeParser",
    "ResumeParserBase",
    "SkillMatch",
    "TailoredQuestion",
    "calculate_skill_match",
    "format_transcript",
    "parse_feedback",
]
