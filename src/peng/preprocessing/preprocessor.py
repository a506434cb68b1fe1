"""
Prompt Engineer - main orchestration class

Composes the classifier, clarification engine, prompt optimizer and session
store into the workflows exposed to callers:
- auto_optimize: classify text, then ask questions or render directly
- engineer_prompt: explicit rendering, optionally forcing a question round
- answer: resume a session with answers, render, and discard the session
- ask: regenerate the questions for a stored session
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from ..errors import SessionNotFoundError
from .classifier import (
    Complexity, LanguageInfo, OptimizationDecision, TaskType,
    detect_language_and_task_type, should_optimize,
)
from .clarification_engine import generate_questions
from .prompt_optimizer import render_prompt
from .session_store import PromptSession, SessionStore, generate_session_id

logger = logging.getLogger(__name__)


@dataclass
class AutoOptimizeResult:
    """Result of the auto-optimize workflow.

    ``optimized_prompt`` is absent both when optimization does not apply and
    when it applied but failed; ``analysis.error`` tells the two apart.
    """
    should_optimize: bool
    analysis: OptimizationDecision
    optimized_prompt: Optional[str] = None
    needs_questions: bool = False
    questions: List[str] = field(default_factory=list)
    session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "shouldOptimize": self.should_optimize,
            "analysis": self.analysis.to_dict(),
        }
        if self.optimized_prompt is not None:
            result["optimizedPrompt"] = self.optimized_prompt
        if self.needs_questions:
            result["needsQuestions"] = True
            result["questions"] = list(self.questions)
            result["sessionId"] = self.session_id
        return result


@dataclass
class EngineeredPrompt:
    """Result of the explicit engineer-prompt path: a prompt or a question round."""
    prompt: Optional[str] = None
    session_id: Optional[str] = None
    questions: List[str] = field(default_factory=list)

    @property
    def needs_answers(self) -> bool:
        return self.session_id is not None


@dataclass
class ClarificationRequest:
    """A stored session together with freshly generated questions."""
    session_id: str
    original_prompt: str
    language: Optional[str]
    task_type: TaskType
    complexity: Complexity
    context: List[str]
    questions: List[str]


class PromptEngineer:
    """
    Orchestrates classification, clarification and rendering.

    The session store is injected so that each server (or test) owns an
    isolated set of sessions.
    """

    def __init__(self, sessions: Optional[SessionStore] = None):
        self.sessions = sessions if sessions is not None else SessionStore()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def auto_optimize(self,
                            text: str,
                            context: Optional[str] = None,
                            force_interactive: bool = False) -> AutoOptimizeResult:
        """Classify text and either start a question round or render it directly."""
        decision = should_optimize(text)

        if not decision.should_optimize:
            self.logger.debug(f"Skipping optimization: {decision.reason}")
            return AutoOptimizeResult(should_optimize=False, analysis=decision)

        info = detect_language_and_task_type(text)
        decision.detected_language = info.language
        decision.task_type = info.task_type.value
        decision.complexity = info.complexity.value

        if force_interactive or decision.needs_questions:
            started = self._start_session(text, info.language, context, info)
            if started is not None:
                session_id, questions = started
                return AutoOptimizeResult(
                    should_optimize=True,
                    analysis=decision,
                    needs_questions=True,
                    questions=questions,
                    session_id=session_id,
                )

        try:
            optimized = render_prompt(text, info.language, context)
        except Exception as e:
            self.logger.exception("Prompt rendering failed")
            failed = OptimizationDecision(
                should_optimize=decision.should_optimize,
                confidence=decision.confidence,
                reason=decision.reason,
                needs_questions=decision.needs_questions,
                questioning_reason=decision.questioning_reason,
                error=str(e),
            )
            return AutoOptimizeResult(should_optimize=True, analysis=failed)

        decision.method = "built-in"
        return AutoOptimizeResult(should_optimize=True, analysis=decision, optimized_prompt=optimized)

    async def engineer_prompt(self,
                              prompt: str,
                              language: Optional[str] = None,
                              context: Optional[str] = None,
                              interactive: bool = False) -> EngineeredPrompt:
        """Render a prompt without the classifier gate, optionally asking questions first."""
        if interactive:
            info = detect_language_and_task_type(prompt)
            started = self._start_session(prompt, language or info.language, context, info)
            if started is not None:
                session_id, questions = started
                return EngineeredPrompt(session_id=session_id, questions=questions)

        return EngineeredPrompt(prompt=render_prompt(prompt, language, context))

    async def answer(self, session_id: str, answers: Sequence[str]) -> str:
        """Finish a session with the user's answers; the session is always discarded."""
        with self.sessions.locked():
            session = self.sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)

            try:
                session.refinements.extend(answers)
                return render_prompt(
                    session.original_prompt,
                    session.language,
                    "\n".join(session.context),
                    session.refinements,
                )
            finally:
                self.sessions.delete(session_id)

    async def ask(self, session_id: str) -> ClarificationRequest:
        """Return a stored session with regenerated questions, leaving it untouched."""
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        context = "\n".join(session.context)
        questions = generate_questions(session.original_prompt, session.language, context or None)
        return ClarificationRequest(
            session_id=session_id,
            original_prompt=session.original_prompt,
            language=session.language,
            task_type=session.task_type,
            complexity=session.complexity,
            context=list(session.context),
            questions=questions,
        )

    def _start_session(self,
                       prompt: str,
                       language: Optional[str],
                       context: Optional[str],
                       info: LanguageInfo) -> Optional[Tuple[str, List[str]]]:
        """Generate questions and store a session; None when questions could not be generated."""
        try:
            questions = generate_questions(prompt, language, context)
        except Exception:
            self.logger.exception("Question generation failed, falling back to direct optimization")
            return None

        session_id = generate_session_id()
        self.sessions.create(session_id, PromptSession(
            session_id=session_id,
            original_prompt=prompt,
            context=[context] if context else [],
            refinements=[],
            language=language,
            task_type=TaskType.parse(info.task_type) or TaskType.CODE,
            complexity=Complexity.parse(info.complexity) or Complexity.MODERATE,
        ))
        self.logger.info(f"Started clarification session {session_id} with {len(questions)} questions")
        return session_id, questions
