"""
Prompt preprocessing for Peng

This package turns raw natural-language requests into structured prompts:
- Classification (natural-language check, language, task type, complexity)
- Clarification question generation
- Prompt rendering
- Short-lived clarification sessions
"""

from .classifier import (
    Complexity, LanguageInfo, OptimizationDecision, TaskType,
    detect_language_and_task_type, should_optimize,
)
from .clarification_engine import generate_questions
from .prompt_optimizer import render_prompt
from .session_store import PromptSession, SessionStore, generate_session_id
from .preprocessor import (
    AutoOptimizeResult, ClarificationRequest, EngineeredPrompt, PromptEngineer
)
from .arguments import ParsedArguments, parse_arguments

__all__ = [
    'Complexity',
    'LanguageInfo',
    'OptimizationDecision',
    'TaskType',
    'detect_language_and_task_type',
    'should_optimize',
    'generate_questions',
    'render_prompt',
    'PromptSession',
    'SessionStore',
    'generate_session_id',
    'AutoOptimizeResult',
    'ClarificationRequest',
    'EngineeredPrompt',
    'PromptEngineer',
    'ParsedArguments',
    'parse_arguments',
]
