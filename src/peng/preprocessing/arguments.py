"""Parsing of slash-command style input.

Supports ``--language=value``, ``--context=value`` (optionally quoted) and
``--interactive`` anywhere in the text; the first occurrence of a valued
option wins and every occurrence is removed from the prompt.
"""

import re
from dataclasses import dataclass
from typing import Optional

LANGUAGE_OPTION = re.compile(r"--language=(\S+)", re.IGNORECASE)
CONTEXT_OPTION = re.compile(r"""--context=["']([^"']+)["']|--context=(\S+)""", re.IGNORECASE)
INTERACTIVE_FLAG = re.compile(r"--interactive\b", re.IGNORECASE)


@dataclass
class ParsedArguments:
    prompt: str
    language: Optional[str] = None
    context: Optional[str] = None
    interactive: bool = False


def parse_arguments(raw: str) -> ParsedArguments:
    prompt = raw
    language: Optional[str] = None
    context: Optional[str] = None
    interactive = False

    for match in LANGUAGE_OPTION.finditer(raw):
        if language is None:
            language = match.group(1)
        prompt = prompt.replace(match.group(0), "", 1).strip()

    for match in CONTEXT_OPTION.finditer(raw):
        if context is None:
            context = match.group(1) or match.group(2)
        prompt = prompt.replace(match.group(0), "", 1).strip()

    for match in INTERACTIVE_FLAG.finditer(raw):
        interactive = True
        prompt = prompt.replace(match.group(0), "", 1).strip()

    # Removing options from the middle leaves doubled spaces behind
    prompt = re.sub(r" {2,}", " ", prompt)

    return ParsedArguments(prompt=prompt, language=language, context=context, interactive=interactive)
