"""
Resume parser agent.

Extracts structured fields (contact details, grouped skills, experience,
education, projects) from resume text, and derives tailored interview
questions and skill-match reports from the result.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from hireflow.models.llm_client import LLMClientBase, Message
from hireflow.schemas import ParsedResume, SkillGroups

logger = logging.getLogger(__name__)

# Resume text beyond this is not sent to the model.
MAX_RESUME_CHARS = 12000


class ResumeParseOutcome(BaseModel):
    """Result of a best-effort resume parse."""

    success: bool = Field(..., description="Whether structured fields were extracted")
    data: ParsedResume | None = Field(default=None, description="Parsed fields on success")
    extracted_skills: list[str] = Field(default_factory=list, description="Flattened skill list")
    error: str = Field(default="", description="Failure reason when success is False")


class TailoredQuestion(BaseModel):
    """An interview question generated from a parsed resume."""

    question: str
    category: str = "technical"
    difficulty: str = "medium"
    expected_skills: list[str] = Field(default_factory=list)


class SkillMatch(BaseModel):
    """Overlap between a candidate's skills and a role's requirements."""

    match_percentage: int = 0
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    total_required: int = 0
    total_matched: int = 0


class ResumeParserBase(ABC):
    """Abstract base class for resume parsers."""

    @abstractmethod
    async def parse(self, resume_text: str) -> ResumeParseOutcome:
        """
        Parse resume text into structured fields.

        Never raises; failures are reported through ``success=False``.
        """
        ...


class ResumeParser(ResumeParserBase):
    """
    LLM-based resume parser.

    Asks the model for a fixed JSON layout and sanitises whatever comes
    back before validating it.
    """

    PARSING_PROMPT = """You are a resume parser. Extract structured information from the following resume text.

RESUME TEXT:
{resume_text}

Return ONLY valid JSON (no markdown, no code fences) in this exact format:
{{
  "name": "candidate full name",
  "email": "email if found, else null",
  "phone": "phone if found, else null",
  "skills": {{
    "languages": ["JavaScript", "Python"],
    "frameworks": ["React", "Node.js"],
    "tools": ["Git", "Docker"],
    "databases": ["MongoDB", "PostgreSQL"]
  }},
  "experience": [
    {{"company": "Company Name", "role": "Job Title", "duration": "Jan 2020 - Dec 2022", "description": "Brief description"}}
  ],
  "education": [
    {{"institution": "University Name", "degree": "Bachelor of Technology", "field": "Computer Science", "year": "2023"}}
  ],
  "projects": [
    {{"name": "Project Name", "description": "Brief description", "technologies": ["React", "Node.js"]}}
  ],
  "summary": "2-3 sentence professional summary",
  "yearsOfExperience": 2.5
}}

If any field is not found, use null or an empty array. Be accurate and extract all relevant information."""

    QUESTIONS_PROMPT = """Based on this candidate's profile, generate 5 technical interview questions.

CANDIDATE PROFILE:
- Skills: {languages}
- Frameworks: {frameworks}
- Experience: {role} at {company}
- Notable Project: {project}

Return ONLY a valid JSON array (no markdown):
[
  {{
    "question": "Question text here",
    "category": "technical|behavioral|project-based",
    "difficulty": "easy|medium|hard",
    "expectedSkills": ["skill1", "skill2"]
  }}
]

Make questions specific to their background, progressive in difficulty."""

    def __init__(self, llm_client: LLMClientBase) -> None:
        """
        Initialize the resume parser.

        Args:
            llm_client: LLM client used for extraction.
        """
        self._llm_client = llm_client

    @staticmethod
    def _clean_str_list(value: Any) -> list[str]:
        """Coerce a value into a list[str], dropping null/empty/non-string items."""
        if not isinstance(value, list):
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    @staticmethod
    def _clean_dict_list(value: Any) -> list[dict[str, Any]]:
        """Coerce a value into a list[dict], dropping non-dicts."""
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @staticmethod
    def _clean_optional_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip() and value.strip().lower() != "null":
            return value.strip()
        return None

    def _sanitize(self, raw: dict[str, Any]) -> dict[str, Any]:
        skills = raw.get("skills")
        if not isinstance(skills, dict):
            skills = {}

        years = raw.get("yearsOfExperience", raw.get("years_of_experience"))
        if isinstance(years, bool) or not isinstance(years, (int, float)):
            years = None

        return {
            "name": self._clean_optional_str(raw.get("name")),
            "email": self._clean_optional_str(raw.get("email")),
            "phone": self._clean_optional_str(raw.get("phone")),
            "skills": SkillGroups(
                languages=self._clean_str_list(skills.get("languages")),
                frameworks=self._clean_str_list(skills.get("frameworks")),
                tools=self._clean_str_list(skills.get("tools")),
                databases=self._clean_str_list(skills.get("databases")),
            ),
            "experience": self._clean_dict_list(raw.get("experience")),
            "education": self._clean_dict_list(raw.get("education")),
            "projects": self._clean_dict_list(raw.get("projects")),
            "summary": self._clean_optional_str(raw.get("summary")),
            "years_of_experience": years,
        }

    async def parse(self, resume_text: str) -> ResumeParseOutcome:
        prompt = self.PARSING_PROMPT.format(resume_text=resume_text[:MAX_RESUME_CHARS])

        try:
            raw = await self._llm_client.chat_with_json(
                messages=[Message(role="user", content=prompt)],
            )
        except Exception as e:
            logger.error(f"Resume parsing failed: {e}")
            return ResumeParseOutcome(success=False, error=str(e))

        if not raw:
            logger.warning("Resume parser returned no usable JSON")
            return ResumeParseOutcome(success=False, error="Empty or invalid JSON from LLM")

        try:
            parsed = ParsedResume(**self._sanitize(raw))
        except PydanticValidationError as e:
            logger.warning(f"Resume parser output failed validation: {e}")
            return ResumeParseOutcome(success=False, error=str(e))

        skills = parsed.skills.flatten()
        logger.info(f"Parsed resume with {len(skills)} skills")
        return ResumeParseOutcome(success=True, data=parsed, extracted_skills=skills)

    async def generate_tailored_questions(self, resume: ParsedResume) -> list[TailoredQuestion]:
        """
        Generate interview questions tailored to a parsed resume.

        Args:
            resume: Parsed resume fields.

        Returns:
            Generated questions, or an empty list on any failure.
        """
        first_job = resume.experience[0] if resume.experience else {}
        first_project = resume.projects[0] if resume.projects else {}
        prompt = self.QUESTIONS_PROMPT.format(
            languages=", ".join(resume.skills.languages) or "General programming",
            frameworks=", ".join(resume.skills.frameworks) or "None specified",
            role=first_job.get("role") or "Entry level",
            company=first_job.get("company") or "N/A",
            project=first_project.get("name") or "N/A",
        )

        raw = await self._llm_client.chat_with_json(
            messages=[Message(role="user", content=prompt)],
            temperature=0.5,
        )
        items = raw.get("items") if isinstance(raw.get("items"), list) else raw.get("questions")
        if not isinstance(items, list):
            logger.warning("Question generation returned no question list")
            return []

        questions = []
        for item in self._clean_dict_list(items):
            question = item.get("question")
            if not isinstance(question, str) or not question.strip():
                continue
            questions.append(
                TailoredQuestion(
                    question=question.strip(),
                    category=str(item.get("category") or "technical"),
                    difficulty=str(item.get("difficulty") or "medium"),
                    expected_skills=self._clean_str_list(item.get("expectedSkills")),
                )
            )
        return questions


def calculate_skill_match(resume_skills: list[str], required_skills: list[str]) -> SkillMatch:
    """
    Compare a candidate's skills with a role's required skills.

    A required skill counts as matched when it is a substring of a resume
    skill or vice versa, case-insensitively.

    Args:
        resume_skills: Skills taken from the parsed resume.
        required_skills: Skills the role requires.

    Returns:
        Match report with a rounded percentage.
    """
    if not resume_skills or not required_skills:
        return SkillMatch(missing_skills=list(required_skills or []), total_required=len(required_skills or []))

    have = [s.lower().strip() for s in resume_skills if s.strip()]
    need = [s.lower().strip() for s in required_skills if s.strip()]
    if not have or not need:
        return SkillMatch(missing_skills=need, total_required=len(need))

    matched = [skill for skill in need if any(skill in own or own in skill for own in have)]
    missing = [skill for skill in need if skill not in matched]

    return SkillMatch(
        match_percentage=round(len(matched) / len(need) * 100),
        matched_skills=matched,
        missing_skills=missing,
        total_required=len(need),
        total_matched=len(matched),
    )


def describe_questions(questions: list[TailoredQuestion]) -> str:
    """Render generated questions as indented JSON for CLI output."""
    return json.dumps([q.model_dump() for q in questions], indent=2)
