"""Prompt engineering tools: engineer, ask, answer and auto-optimize."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..preprocessing import PromptEngineer
from .base_tools import BaseTool, ToolRegistry


class _StrictArguments(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class EngineerPromptArguments(_StrictArguments):
    prompt: str
    language: Optional[str] = None
    context: Optional[str] = None
    interactive: Optional[bool] = None


class AskClarificationArguments(_StrictArguments):
    sessionId: str
    questions: List[str]


class AnswerQuestionsArguments(_StrictArguments):
    sessionId: str
    answers: List[str]


class AutoOptimizeArguments(_StrictArguments):
    text: str
    context: Optional[str] = None
    interactive: Optional[bool] = None


def _numbered(questions: List[str]) -> str:
    return "\n".join(f"{i + 1}. {q}" for i, q in enumerate(questions))


def _schema(properties: Dict[str, Any], required: List[str], title: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "title": title,
    }


_SESSION_ID = {"type": "string", "description": "The session ID for this prompt engineering session"}


class PromptTool(BaseTool):
    """Tool backed by a shared PromptEngineer."""

    def __init__(self, engineer: PromptEngineer, name: str, description: str):
        super().__init__(name, description)
        self.engineer = engineer


class EngineerPromptTool(PromptTool):
    arguments_model = EngineerPromptArguments

    def __init__(self, engineer: PromptEngineer):
        super().__init__(
            engineer,
            "engineer_prompt",
            "Intelligently engineers and optimizes prompts for Claude Code, with interactive "
            "refinement and automatic optimization for maximum effectiveness.",
        )

    def get_parameters_schema(self) -> Dict[str, Any]:
        return _schema({
            "prompt": {"type": "string", "description": "The raw user prompt that needs engineering"},
            "language": {
                "type": "string",
                "description": "The programming language (optional, will be detected if not provided)",
            },
            "context": {
                "type": "string",
                "description": "Additional context about the codebase or project (optional)",
            },
            "interactive": {
                "type": "boolean",
                "description": "Whether to enable interactive Q&A refinement (default: false)",
            },
        }, ["prompt"], "engineer_promptArguments")

    async def execute(self, arguments: EngineerPromptArguments) -> str:
        result = await self.engineer.engineer_prompt(
            arguments.prompt,
            language=arguments.language,
            context=arguments.context,
            interactive=bool(arguments.interactive),
        )
        if result.needs_answers:
            return (
                f"Interactive prompt engineering session started (ID: {result.session_id}).\n\n"
                "To help create the best prompt for Claude Code, please answer these questions:\n\n"
                f"{_numbered(result.questions)}\n\n"
                f'Use the answer_questions tool with session ID "{result.session_id}" to provide your answers.'
            )
        return (
            f"**Optimized Prompt for Claude Code:**\n\n{result.prompt}\n\n"
            "**Are you ready to proceed with this task?**"
        )


class AskClarificationTool(PromptTool):
    arguments_model = AskClarificationArguments

    def __init__(self, engineer: PromptEngineer):
        super().__init__(
            engineer,
            "ask_clarification",
            "Ask clarifying questions to better understand user requirements and refine the "
            "prompt engineering process.",
        )

    def get_parameters_schema(self) -> Dict[str, Any]:
        return _schema({
            "sessionId": _SESSION_ID,
            "questions": {
                "type": "array",
                "items": {"type": "string"},
                "description": "List of clarifying questions to ask the user",
            },
        }, ["sessionId", "questions"], "ask_clarificationArguments")

    async def execute(self, arguments: AskClarificationArguments) -> str:
        questions = arguments.questions
        if not questions:
            request = await self.engineer.ask(arguments.sessionId)
            questions = request.questions
        return (
            f"Please answer these clarifying questions:\n\n{_numbered(questions)}\n\n"
            f'Use the answer_questions tool with session ID "{arguments.sessionId}" when ready.'
        )


class AnswerQuestionsTool(PromptTool):
    arguments_model = AnswerQuestionsArguments

    def __init__(self, engineer: PromptEngineer):
        super().__init__(
            engineer,
            "answer_questions",
            "Provide answers to clarifying questions and continue the prompt engineering process.",
        )

    def get_parameters_schema(self) -> Dict[str, Any]:
        return _schema({
            "sessionId": _SESSION_ID,
            "answers": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Answers to the previously asked questions",
            },
        }, ["sessionId", "answers"], "answer_questionsArguments")

    async def execute(self, arguments: AnswerQuestionsArguments) -> str:
        prompt = await self.engineer.answer(arguments.sessionId, arguments.answers)
        return (
            f"**Final Optimized Prompt for Claude Code:**\n\n{prompt}\n\n"
            "**Are you ready to use this prompt?**"
        )


class AutoOptimizeTool(PromptTool):
    arguments_model = AutoOptimizeArguments

    def __init__(self, engineer: PromptEngineer):
        super().__init__(
            engineer,
            "auto_optimize",
            "Automatically detects and optimizes natural language text for Claude Code. Use this "
            "when the user is writing conversational text that should be translated into an "
            "optimized prompt.",
        )

    def get_parameters_schema(self) -> Dict[str, Any]:
        return _schema({
            "text": {
                "type": "string",
                "description": "The natural language text to analyze and potentially optimize",
            },
            "context": {
                "type": "string",
                "description": "Any additional context about the current project or situation",
            },
            "interactive": {
                "type": "boolean",
                "description": "Whether to enable interactive questioning if the prompt is unclear or "
                               "needs more info (default: auto-detect based on complexity)",
            },
        }, ["text"], "auto_optimizeArguments")

    async def execute(self, arguments: AutoOptimizeArguments) -> str:
        text = arguments.text
        result = await self.engineer.auto_optimize(
            text, context=arguments.context, force_interactive=bool(arguments.interactive)
        )
        analysis = result.analysis

        if not result.should_optimize:
            return (
                "**Analysis:** This text doesn't appear to need optimization.\n\n"
                f"Reason: {analysis.reason}\n"
                f"Confidence: {analysis.confidence * 100:.1f}%\n\n"
                f'**Original text:** "{text}"'
            )

        if result.needs_questions and result.questions and result.session_id:
            return (
                "**🤔 I need more information to optimize this effectively!**\n\n"
                f"**Analysis:** {analysis.questioning_reason or 'Request needs clarification'}\n\n"
                "**Questions to help me create the best prompt:**\n\n"
                f"{_numbered(result.questions)}\n\n"
                "**Next Step:** Use the answer_questions tool with session ID "
                f'"{result.session_id}" to provide your answers.\n\n'
                "---\n"
                f"**Detected:** {analysis.detected_language or 'General'} | "
                f"{analysis.task_type} | {analysis.complexity}"
            )

        if result.optimized_prompt:
            return (
                f"**🚀 Auto-Optimized Prompt for Claude Code:**\n\n{result.optimized_prompt}\n\n"
                "**Are you ready to use this prompt?**"
            )

        return (
            "**Analysis:** This text appears to be a prompt that should be optimized, but "
            "optimization failed.\n\n"
            f"Reason: {analysis.reason}\n"
            f"Error: {analysis.error or 'Unknown error'}\n\n"
            f'**Original text:** "{text}"'
        )


def build_tool_registry(engineer: PromptEngineer) -> ToolRegistry:
    """Register the four prompt tools, in their advertised order."""
    registry = ToolRegistry()
    for tool_class in (EngineerPromptTool, AskClarificationTool, AnswerQuestionsTool, AutoOptimizeTool):
        registry.register(tool_class(engineer))
    return registry
