"""
Prompt Optimizer - renders the final structured prompt

Turns a raw request into a block of markdown with:
- An optional context section
- A task statement with task-type specific requirements
- Caller refinements as additional requirements
- A closing confirmation line

Rendering is pure: task type and complexity are recomputed from the prompt
on every call, so identical arguments always give identical output.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .classifier import (
    Complexity, TaskType, detect_complexity, detect_render_language, detect_task_type
)

logger = logging.getLogger(__name__)

CONTEXT_TEMPLATE = "**Context:** {context}\n\n"
ADDITIONAL_REQUIREMENTS_HEADER = "\n**Additional Requirements:**\n"
CLOSING_LINE = "\n**Ready to proceed with this task?**"


def _debug_block(prompt: str, language: str, complexity: Complexity) -> str:
    return (
        f"**Task:** Debug and fix the following issue:\n\n{prompt}\n\n**Requirements:**\n"
        "- Use file search tools (Grep/Glob) to locate relevant code\n"
        "- Read and analyze the problematic files\n"
        "- Identify the root cause and implement a fix\n"
        "- Test the solution if possible\n"
    )


def _refactor_block(prompt: str, language: str, complexity: Complexity) -> str:
    return (
        f"**Task:** Refactor and improve the following code:\n\n{prompt}\n\n**Requirements:**\n"
        "- Maintain existing functionality\n"
        f"- Follow {language} best practices\n"
        "- Improve code readability and maintainability\n"
        "- Use existing project patterns and conventions\n"
    )


def _test_block(prompt: str, language: str, complexity: Complexity) -> str:
    return (
        f"**Task:** Create comprehensive tests for:\n\n{prompt}\n\n**Requirements:**\n"
        "- Follow the project's existing test patterns\n"
        "- Cover edge cases and error scenarios\n"
        f"- Use appropriate testing framework for {language}\n"
    )


def _explain_block(prompt: str, language: str, complexity: Complexity) -> str:
    return (
        f"**Task:** Explain the following:\n\n{prompt}\n\n**Requirements:**\n"
        "- Provide clear, structured explanation\n"
        "- Use examples where helpful\n"
        "- Cover both high-level concepts and implementation details\n"
    )


def _architecture_block(prompt: str, language: str, complexity: Complexity) -> str:
    return (
        f"**Task:** Design and plan architecture for:\n\n{prompt}\n\n**Requirements:**\n"
        "- Consider scalability and maintainability\n"
        "- Follow established design patterns\n"
        "- Document key decisions and trade-offs\n"
    )


def _generic_block(prompt: str, language: str, complexity: Complexity) -> str:
    block = (
        f"**Task:** {prompt}\n\n**Implementation Requirements:**\n"
        f"- Follow {language} best practices and conventions\n"
        "- Use existing project patterns where applicable\n"
    )
    if complexity == Complexity.COMPLEX:
        block += "- Break down into manageable steps using TodoWrite tool\n"
    block += "- Ensure code quality and maintainability\n"
    return block


TASK_BLOCKS: Dict[TaskType, Callable[[str, str, Complexity], str]] = {
    TaskType.DEBUG: _debug_block,
    TaskType.REFACTOR: _refactor_block,
    TaskType.TEST: _test_block,
    TaskType.EXPLAIN: _explain_block,
    TaskType.ARCHITECTURE: _architecture_block,
}


def render_prompt(prompt: str,
                  language: Optional[str] = None,
                  context: Optional[str] = None,
                  refinements: Optional[Sequence[str]] = None) -> str:
    """
    Render the optimized prompt.

    Args:
        prompt: Original user request, embedded verbatim
        language: Explicit language; detected from the prompt when empty
        context: Free-text context placed before the task
        refinements: Answers appended as additional requirements, in order

    Returns:
        The rendered markdown text
    """
    effective_language = language or detect_render_language(prompt)
    task_type = detect_task_type(prompt) or TaskType.CODE
    complexity = detect_complexity(prompt)

    parts: List[str] = []

    if context:
        parts.append(CONTEXT_TEMPLATE.format(context=context))

    block = TASK_BLOCKS.get(task_type, _generic_block)
    parts.append(block(prompt, effective_language, complexity))

    if refinements:
        parts.append(ADDITIONAL_REQUIREMENTS_HEADER)
        parts.append("\n".join(f"- {refinement}" for refinement in refinements))
        parts.append("\n")

    parts.append(CLOSING_LINE)

    logger.debug(
        f"Rendered {task_type.value} prompt for {effective_language} "
        f"({complexity.value}, {len(refinements or [])} refinements)"
    )
    return "".join(parts)
