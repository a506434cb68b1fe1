"""
Classifier - rule-based analysis of raw user text

Decides whether a piece of text is a natural-language request worth
optimizing and derives:
- Source language hint
- Task category
- Complexity tier
- Whether clarifying questions are needed (and why)

Every decision is a deterministic regex match; first match wins wherever
a table is consulted, so table order is part of the behaviour.
"""

import re
import logging
from typing import Any, Dict, Optional, Pattern, Tuple
from dataclasses import dataclass, asdict
from enum import Enum

logger = logging.getLogger(__name__)


class TaskType(str, Enum):
    """Task categories a prompt can be rendered for."""
    CODE = "code"
    DEBUG = "debug"
    EXPLAIN = "explain"
    REFACTOR = "refactor"
    TEST = "test"
    ARCHITECTURE = "architecture"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["TaskType"]:
        """Return the matching member, or None for unknown text."""
        try:
            return cls(value)
        except ValueError:
            return None


class Complexity(str, Enum):
    """Complexity tiers."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Complexity"]:
        """Return the matching member, or None for unknown text."""
        try:
            return cls(value)
        except ValueError:
            return None


def _rx(alternatives: str) -> Pattern[str]:
    return re.compile(rf"\b({alternatives})\b", re.IGNORECASE)


# Natural-language indicator groups
PROMPT_INDICATORS: Tuple[Pattern[str], ...] = (
    # Direct requests
    _rx(r"help me|can you|please|could you|would you|i need|i want"),
    # Problem descriptions
    _rx(r"issue|problem|bug|error|not working|broken|failing"),
    # Task requests
    _rx(r"create|build|make|add|implement|write|fix|update|change"),
    # Improvement requests
    _rx(r"improve|optimize|refactor|clean up|better|faster|slower"),
    # Questions
    _rx(r"how do|how can|what is|why is|where is|when should"),
    # Uncertainty markers
    _rx(r"not sure|unsure|confused|don't understand|struggling"),
    # Conversational openers
    _rx(r"i'm|i've been|i have|i was|i think|i believe"),
)

FIRST_PERSON = _rx(r"i|me|my|mine")
CODE_TERMS = _rx(r"function|component|api|database|server|frontend|backend|code|file|script")
CONVERSATION_CLOSERS = _rx(r"thanks|thank you|yes|no|ok|okay|sure|got it|makes sense")
STRUCTURE_MARKERS = ("**", "1.", "- ")

# Questioning triggers
CRITICAL_UNCERTAINTY = _rx(r"not sure|unsure|don't know|unclear|confused|which one|what should|help me choose")
BARE_ACTION_VERBS = _rx(r"help|fix|do|make")
CONCRETE_NOUNS = _rx(r"function|component|file|error|bug")

# Questioning reasons
UNCERTAINTY_PHRASES = _rx(r"not sure|unsure|don't know|unclear|confused")
IMPROVEMENT_VERBS = _rx(r"fix|optimize|improve|better|faster")
PROBLEM_NOUNS = _rx(r"issue|problem|not working")

# Language tables, in declared order
LANGUAGE_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("javascript", _rx(r"javascript|js|node|npm|react|vue|angular")),
    ("typescript", _rx(r"typescript|ts|tsx")),
    ("python", _rx(r"python|py|django|flask|pandas|numpy")),
    ("java", _rx(r"java|spring|maven|gradle")),
    ("cpp", _rx(r"c\+\+|cpp|cmake")),
    ("rust", _rx(r"rust|cargo|rustc")),
    ("go", _rx(r"golang|go|gin")),
    ("php", _rx(r"php|laravel|composer")),
    ("ruby", _rx(r"ruby|rails|gem")),
    ("csharp", _rx(r"c#|csharp|dotnet|\.net")),
)

# The renderer's fallback detector only knows a subset of the analysis table.
RENDER_LANGUAGES = ("javascript", "typescript", "python", "java", "rust", "go")
RENDER_LANGUAGE_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (lang, pattern) for lang, pattern in LANGUAGE_PATTERNS if lang in RENDER_LANGUAGES
)

DEFAULT_LANGUAGE = "general"

TASK_PATTERNS: Tuple[Tuple[TaskType, Pattern[str]], ...] = (
    (TaskType.DEBUG, _rx(r"debug|fix|error|bug|issue|problem|not working")),
    (TaskType.TEST, _rx(r"test|testing|unit test|integration test|jest|pytest")),
    (TaskType.REFACTOR, _rx(r"refactor|clean|optimize|improve|restructure")),
    (TaskType.EXPLAIN, _rx(r"explain|understand|how does|what is|why")),
    (TaskType.ARCHITECTURE, _rx(r"architecture|design|pattern|structure|system")),
)

SCALE_TERMS = _rx(r"complex|advanced|enterprise|scale")


@dataclass
class LanguageInfo:
    """Language, task type and complexity detected from a prompt."""
    language: Optional[str]
    task_type: TaskType
    complexity: Complexity


@dataclass
class OptimizationDecision:
    """Outcome of classifying a piece of text; never persisted."""
    should_optimize: bool
    confidence: float
    reason: str
    needs_questions: bool = False
    questioning_reason: Optional[str] = None

    # Filled in by the orchestrator once the text is accepted
    detected_language: Optional[str] = None
    task_type: Optional[str] = None
    complexity: Optional[str] = None
    method: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        keys = {
            "should_optimize": "shouldOptimize",
            "confidence": "confidence",
            "reason": "reason",
            "needs_questions": "needsQuestions",
            "questioning_reason": "questioningReason",
            "detected_language": "detectedLanguage",
            "task_type": "taskType",
            "complexity": "complexity",
            "method": "method",
            "error": "error",
        }
        return {keys[k]: v for k, v in asdict(self).items() if v is not None}


def is_natural_language_prompt(text: str) -> bool:
    """Detect if text is natural language that should be optimized."""
    if any(pattern.search(text) for pattern in PROMPT_INDICATORS):
        return True

    is_question = "?" in text
    is_conversational = len(text) > 20 and (is_question or bool(FIRST_PERSON.search(text)))
    has_code_terms = bool(CODE_TERMS.search(text))

    return is_conversational and (is_question or has_code_terms)


def should_ask_questions(text: str) -> bool:
    """Only ask when the user is uncertain or the request is extremely vague."""
    if CRITICAL_UNCERTAINTY.search(text):
        return True

    return (
        len(text) < 20
        and bool(BARE_ACTION_VERBS.search(text))
        and not CONCRETE_NOUNS.search(text)
    )


def get_questioning_reason(text: str) -> str:
    if len(text) < 30:
        return "Request is too brief - needs more details"

    if UNCERTAINTY_PHRASES.search(text):
        return "User expressed uncertainty - clarification needed"

    if IMPROVEMENT_VERBS.search(text):
        return "Vague improvement request - needs specific details"

    if PROBLEM_NOUNS.search(text):
        return "Problem reported without details - need specifics"

    return "Request needs clarification for best results"


def should_optimize(text: str) -> OptimizationDecision:
    """Decide whether text should be turned into a structured prompt."""
    if len(text) < 10:
        return OptimizationDecision(False, 0.0, "Text too short")

    # Already a well-structured prompt
    if any(marker in text for marker in STRUCTURE_MARKERS):
        return OptimizationDecision(False, 0.1, "Already structured")

    if CONVERSATION_CLOSERS.search(text) and len(text) < 50:
        return OptimizationDecision(False, 0.2, "Simple conversation")

    if is_natural_language_prompt(text):
        confidence = min(0.9, len(text) / 100 + 0.3)
        needs_questions = should_ask_questions(text)
        return OptimizationDecision(
            should_optimize=True,
            confidence=confidence,
            reason="Natural language prompt detected",
            needs_questions=needs_questions,
            questioning_reason=get_questioning_reason(text) if needs_questions else None,
        )

    return OptimizationDecision(False, 0.1, "Not a prompt")


def _first_match(table, text: str):
    for tag, pattern in table:
        if pattern.search(text):
            return tag
    return None


def detect_language(text: str) -> Optional[str]:
    """Return the first language of the analysis table mentioned in text."""
    return _first_match(LANGUAGE_PATTERNS, text)


def detect_render_language(text: str) -> str:
    """Language lookup used by the renderer; falls back to ``general``."""
    return _first_match(RENDER_LANGUAGE_PATTERNS, text) or DEFAULT_LANGUAGE


def detect_task_type(text: str) -> Optional[TaskType]:
    return _first_match(TASK_PATTERNS, text)


def detect_complexity(text: str) -> Complexity:
    if len(text) > 200 or SCALE_TERMS.search(text):
        return Complexity.COMPLEX
    if len(text) > 50:
        return Complexity.MODERATE
    return Complexity.SIMPLE


def detect_language_and_task_type(text: str) -> LanguageInfo:
    """Detect language, task type and complexity in one pass."""
    info = LanguageInfo(
        language=detect_language(text),
        task_type=detect_task_type(text) or TaskType.CODE,
        complexity=detect_complexity(text),
    )
    logger.debug(
        f"Detected language={info.language} task={info.task_type.value} "
        f"complexity={info.complexity.value}"
    )
    return info
