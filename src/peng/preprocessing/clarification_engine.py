"""
Clarification Engine - clarifying question generation

Produces a short, ordered list of questions for requests that are too vague
to optimize directly. Question groups are appended in a fixed order and the
result is capped, so the output is never empty and never longer than
MAX_QUESTIONS.
"""

import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 3

PROBLEM_KEYWORDS = re.compile(r"\b(fix|error|bug|issue|problem)\b", re.IGNORECASE)
IMPROVEMENT_KEYWORDS = re.compile(r"\b(improve|optimize|better)\b", re.IGNORECASE)
IMPROVEMENT_AXES = re.compile(r"\b(performance|speed|memory|size)\b", re.IGNORECASE)
PROJECT_KEYWORDS = re.compile(r"\b(app|application|system|project)\b", re.IGNORECASE)

PROBLEM_QUESTIONS = [
    "What specific error or problem are you encountering?",
    "What should the expected behavior be?",
]
IMPROVEMENT_QUESTION = "What specific aspect needs improvement (performance, readability, maintainability)?"
TECH_STACK_QUESTION = "What technology stack or programming language are you using?"
FALLBACK_QUESTIONS = [
    "What specific outcome are you looking for?",
    "Are there any constraints or requirements I should know about?",
]


def generate_questions(prompt: str,
                       language: Optional[str] = None,
                       context: Optional[str] = None) -> List[str]:
    """
    Generate clarifying questions based on prompt analysis.

    Args:
        prompt: Raw user request
        language: Detected or declared language; suppresses the tech-stack question
        context: Caller-supplied context (currently not consulted)

    Returns:
        Between one and MAX_QUESTIONS questions, in rule order
    """
    questions: List[str] = []

    if PROBLEM_KEYWORDS.search(prompt) and len(prompt) < 50:
        questions.extend(PROBLEM_QUESTIONS)

    if IMPROVEMENT_KEYWORDS.search(prompt) and not IMPROVEMENT_AXES.search(prompt):
        questions.append(IMPROVEMENT_QUESTION)

    if PROJECT_KEYWORDS.search(prompt) and not language:
        questions.append(TECH_STACK_QUESTION)

    if not questions:
        questions.extend(FALLBACK_QUESTIONS)

    logger.debug(f"Generated {len(questions)} clarifying questions (capped at {MAX_QUESTIONS})")
    return questions[:MAX_QUESTIONS]
