"""
Tests for the PromptEngineer orchestration workflows.

Covers:
- Auto-optimization decisions and direct rendering
- Question rounds and session lifecycle
- Graceful degradation when question generation or rendering fails
- The ask and explicit engineer-prompt paths
"""

import asyncio
import threading
import time

import pytest
from unittest.mock import patch

from ...errors import SessionNotFoundError
from .. import preprocessor as preprocessor_module
from ..classifier import Complexity, TaskType
from ..clarification_engine import FALLBACK_QUESTIONS, IMPROVEMENT_QUESTION, PROBLEM_QUESTIONS
from ..preprocessor import AutoOptimizeResult, PromptEngineer
from ..prompt_optimizer import render_prompt
from ..session_store import SessionStore

DEBUG_LINE = "- Use file search tools (Grep/Glob) to locate relevant code"


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def engineer(store):
    return PromptEngineer(store)


class TestAutoOptimize:

    @pytest.mark.asyncio
    async def test_conversation_is_not_optimized(self, engineer, store):
        result = await engineer.auto_optimize("thanks, got it")

        assert result.should_optimize is False
        assert result.analysis.reason == "Simple conversation"
        assert result.optimized_prompt is None
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_direct_optimization(self, engineer, store):
        result = await engineer.auto_optimize("fix my React app performance issues")

        assert result.should_optimize is True
        assert result.needs_questions is False
        assert DEBUG_LINE in result.optimized_prompt.splitlines()
        assert result.analysis.detected_language == "javascript"
        assert result.analysis.task_type == "debug"
        assert result.analysis.complexity == "simple"
        assert result.analysis.method == "built-in"
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_direct_optimization_includes_context(self, engineer):
        result = await engineer.auto_optimize("fix my React app performance issues", context="Vite SPA")

        assert result.optimized_prompt.startswith("**Context:** Vite SPA\n\n")

    @pytest.mark.asyncio
    async def test_vague_request_starts_session(self, engineer, store):
        result = await engineer.auto_optimize("help me do it")

        assert result.should_optimize is True
        assert result.needs_questions is True
        assert result.optimized_prompt is None
        assert result.questions == FALLBACK_QUESTIONS
        assert result.analysis.questioning_reason == "Request is too brief - needs more details"

        session = store.get(result.session_id)
        assert session.original_prompt == "help me do it"
        assert session.context == []
        assert session.refinements == []
        assert session.language is None
        assert session.task_type == TaskType.CODE
        assert session.complexity == Complexity.SIMPLE

    @pytest.mark.asyncio
    async def test_forced_interactive(self, engineer, store):
        result = await engineer.auto_optimize(
            "fix my React app performance issues", context="Vite SPA", force_interactive=True
        )

        assert result.needs_questions is True
        assert result.questions == PROBLEM_QUESTIONS
        session = store.get(result.session_id)
        assert session.language == "javascript"
        assert session.task_type == TaskType.DEBUG
        assert session.context == ["Vite SPA"]

    @pytest.mark.asyncio
    async def test_forced_interactive_does_not_override_gate(self, engineer, store):
        result = await engineer.auto_optimize("thanks, got it", force_interactive=True)

        assert result.should_optimize is False
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_question_failure_falls_back_to_rendering(self, engineer, store):
        with patch.object(preprocessor_module, "generate_questions", side_effect=RuntimeError("boom")):
            result = await engineer.auto_optimize("help me do it")

        assert result.should_optimize is True
        assert result.needs_questions is False
        assert result.optimized_prompt == render_prompt("help me do it")
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_render_failure_is_reported_in_analysis(self, engineer):
        with patch.object(preprocessor_module, "render_prompt", side_effect=ValueError("broken template")):
            result = await engineer.auto_optimize("fix my React app performance issues")

        assert result.should_optimize is True
        assert result.optimized_prompt is None
        assert result.analysis.error == "broken template"
        assert result.analysis.reason == "Natural language prompt detected"

    @pytest.mark.asyncio
    async def test_result_to_dict(self, engineer):
        result = await engineer.auto_optimize("help me do it")
        payload = result.to_dict()

        assert payload["shouldOptimize"] is True
        assert payload["needsQuestions"] is True
        assert payload["sessionId"] == result.session_id
        assert payload["questions"] == FALLBACK_QUESTIONS
        assert payload["analysis"]["questioningReason"] == "Request is too brief - needs more details"
        assert "optimizedPrompt" not in payload

    def test_not_applicable_result_to_dict(self):
        from ..classifier import should_optimize

        payload = AutoOptimizeResult(False, should_optimize("hi")).to_dict()

        assert payload == {
            "shouldOptimize": False,
            "analysis": {
                "shouldOptimize": False,
                "confidence": 0.0,
                "reason": "Text too short",
                "needsQuestions": False,
            },
        }


class TestAnswer:

    @pytest.mark.asyncio
    async def test_answers_become_additional_requirements(self, engineer, store):
        started = await engineer.auto_optimize("help me do it", context="Django project")

        prompt = await engineer.answer(started.session_id, ["Add a login page", "Use class-based views"])

        assert prompt.startswith("**Context:** Django project\n\n")
        assert "\n**Additional Requirements:**\n- Add a login page\n- Use class-based views\n" in prompt
        assert store.get(started.session_id) is None

    @pytest.mark.asyncio
    async def test_empty_answers_round_trip(self, engineer, store):
        started = await engineer.auto_optimize(
            "fix my React app performance issues", context="Vite SPA", force_interactive=True
        )

        prompt = await engineer.answer(started.session_id, [])

        assert prompt == render_prompt("fix my React app performance issues", "javascript", "Vite SPA")
        assert "Additional Requirements" not in prompt

    @pytest.mark.asyncio
    async def test_session_cannot_be_answered_twice(self, engineer):
        started = await engineer.auto_optimize("help me do it")
        await engineer.answer(started.session_id, ["anything"])

        with pytest.raises(SessionNotFoundError):
            await engineer.answer(started.session_id, ["again"])

    @pytest.mark.asyncio
    async def test_unknown_session(self, engineer, store):
        with pytest.raises(SessionNotFoundError) as excinfo:
            await engineer.answer("ghost", ["hello"])

        assert "ghost" in excinfo.value.message
        assert excinfo.value.session_id == "ghost"
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_session_deleted_when_rendering_fails(self, engineer, store):
        started = await engineer.auto_optimize("help me do it")

        with patch.object(preprocessor_module, "render_prompt", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                await engineer.answer(started.session_id, ["anything"])

        assert store.get(started.session_id) is None

    @pytest.mark.asyncio
    async def test_answers_are_not_deduplicated(self, engineer):
        started = await engineer.auto_optimize("help me do it")

        prompt = await engineer.answer(started.session_id, ["same", "same"])

        assert "- same\n- same\n" in prompt

    def test_concurrent_answers_render_once(self, engineer, store):
        started = asyncio.run(engineer.auto_optimize("help me do it"))
        barrier = threading.Barrier(8)
        rendered, missing = [], []

        def slow_render(*args, **kwargs):
            rendered.append(args)
            time.sleep(0.01)
            return render_prompt(*args, **kwargs)

        def answer_once():
            barrier.wait()
            try:
                asyncio.run(engineer.answer(started.session_id, ["x"]))
            except SessionNotFoundError:
                missing.append(started.session_id)

        with patch.object(preprocessor_module, "render_prompt", side_effect=slow_render):
            threads = [threading.Thread(target=answer_once) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert len(rendered) == 1
        assert len(missing) == 7
        assert store.get(started.session_id) is None


class TestAsk:

    @pytest.mark.asyncio
    async def test_ask_regenerates_questions(self, engineer, store):
        started = await engineer.engineer_prompt("improve my app", language="rust", interactive=True)

        request = await engineer.ask(started.session_id)

        assert request.original_prompt == "improve my app"
        assert request.language == "rust"
        assert request.questions == [IMPROVEMENT_QUESTION]
        assert store.get(started.session_id).refinements == []

    @pytest.mark.asyncio
    async def test_ask_unknown_session(self, engineer):
        with pytest.raises(SessionNotFoundError):
            await engineer.ask("ghost")


class TestEngineerPrompt:

    @pytest.mark.asyncio
    async def test_direct(self, engineer, store):
        result = await engineer.engineer_prompt("add a settings page", language="typescript")

        assert result.needs_answers is False
        assert result.prompt == render_prompt("add a settings page", "typescript")
        assert store.list_ids() == []

    @pytest.mark.asyncio
    async def test_bypasses_classifier(self, engineer):
        result = await engineer.engineer_prompt("ok")

        assert result.prompt is not None
        assert result.prompt.startswith("**Task:** ok\n\n")

    @pytest.mark.asyncio
    async def test_interactive_uses_declared_language(self, engineer, store):
        result = await engineer.engineer_prompt("improve my app", language="rust", interactive=True)

        assert result.needs_answers is True
        assert result.questions == [IMPROVEMENT_QUESTION]
        session = store.get(result.session_id)
        assert session.language == "rust"
        assert session.task_type == TaskType.REFACTOR

        prompt = await engineer.answer(result.session_id, ["focus on startup time"])
        assert "- Follow rust best practices\n" in prompt
