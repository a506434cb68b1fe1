"""Command-line interface for Peng.

Runs the MCP server or the prompt workflows directly from a terminal. Since
sessions only live inside one process, interactive runs collect answers with
prompts before the process exits.
"""

from __future__ import annotations

import asyncio
import json
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.markdown import Markdown

from . import __version__
from .errors import PengError
from .logging_config import configure_logging
from .preprocessing import (
    PromptEngineer, detect_language_and_task_type, parse_arguments, should_optimize
)
from .settings import AppSettings


def _collect_answers(questions: List[str]) -> List[str]:
    answers = []
    for number, question in enumerate(questions, start=1):
        answer = click.prompt(f"{number}. {question}", default="", show_default=False)
        if answer.strip():
            answers.append(answer.strip())
    return answers


def _show_prompt(prompt: str, plain: bool) -> None:
    if plain:
        click.echo(prompt)
    else:
        Console().print(Markdown(prompt))


def _finish_session(engineer: PromptEngineer, session_id: str, questions: List[str], plain: bool) -> None:
    click.echo(click.style("I need more information to optimize this effectively!", fg="yellow", bold=True))
    answers = _collect_answers(questions)
    prompt = asyncio.run(engineer.answer(session_id, answers))
    _show_prompt(prompt, plain)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="peng")
@click.option("--log-level", default=None, help="Log level (override env)")
@click.option("--log-format", type=click.Choice(["json", "text"]), default=None)
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], log_format: Optional[str]) -> None:
    """Peng - prompt engineering assistant for coding agents."""
    settings = AppSettings()
    if log_level:
        settings.log_level = log_level.upper()
    if log_format:
        settings.log_format = log_format
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@main.command()
@click.pass_obj
def serve(settings: AppSettings) -> None:
    """Run the MCP server on stdio."""
    from .mcp.server import run_stdio_blocking

    run_stdio_blocking(settings)


@main.command()
@click.argument("text", nargs=-1, required=True)
def classify(text: Tuple[str, ...]) -> None:
    """Show how TEXT is classified, as JSON."""
    joined = " ".join(text)
    decision = should_optimize(joined)
    info = detect_language_and_task_type(joined)
    payload = decision.to_dict()
    payload.update({
        "detectedLanguage": info.language,
        "taskType": info.task_type.value,
        "complexity": info.complexity.value,
    })
    click.echo(json.dumps(payload, indent=2))


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--context", default=None, help="Context about the project or situation")
@click.option("--interactive", is_flag=True, help="Always ask clarifying questions first")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result object")
@click.option("--plain", is_flag=True, help="Print the prompt without markdown rendering")
def optimize(text: Tuple[str, ...], context: Optional[str], interactive: bool,
             as_json: bool, plain: bool) -> None:
    """Auto-detect whether TEXT needs optimizing and optimize it."""
    engineer = PromptEngineer()
    joined = " ".join(text)
    result = asyncio.run(engineer.auto_optimize(joined, context, interactive))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    analysis = result.analysis
    if not result.should_optimize:
        click.echo("This text doesn't appear to need optimization.")
        click.echo(f"Reason: {analysis.reason}")
        click.echo(f"Confidence: {analysis.confidence * 100:.1f}%")
        return

    if result.needs_questions and result.session_id:
        if analysis.questioning_reason:
            click.echo(f"Analysis: {analysis.questioning_reason}")
        _finish_session(engineer, result.session_id, result.questions, plain)
        return

    if result.optimized_prompt is None:
        raise PengError(f"Optimization failed: {analysis.error or 'Unknown error'}")

    _show_prompt(result.optimized_prompt, plain)


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("raw", nargs=-1, required=True)
@click.option("--plain", is_flag=True, help="Print the prompt without markdown rendering")
def engineer(raw: Tuple[str, ...], plain: bool) -> None:
    """Engineer a prompt from slash-command style input.

    Accepts --language=VALUE, --context=VALUE and --interactive inside RAW.
    """
    parsed = parse_arguments(" ".join(raw))
    if not parsed.prompt:
        raise PengError("Nothing to engineer", hint="Pass the request text after the options.")

    prompt_engineer = PromptEngineer()
    result = asyncio.run(prompt_engineer.engineer_prompt(
        parsed.prompt, language=parsed.language, context=parsed.context,
        interactive=parsed.interactive,
    ))
    if result.needs_answers:
        _finish_session(prompt_engineer, result.session_id, result.questions, plain)
        return
    _show_prompt(result.prompt, plain)


if __name__ == "__main__":
    main()
