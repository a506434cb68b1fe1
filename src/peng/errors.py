"""Error types for Peng with friendly, actionable messages."""

from __future__ import annotations
import click
from typing import Optional


class PengError(click.ClickException):
    """Base class for all user-visible errors with enhanced formatting."""

    #: Emoji shown at the beginning of every error line
    emoji: str = "❌"

    #: Short, actionable suggestion shown after the main message.
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint

    @property
    def formatted_message(self) -> str:
        """
        Returns the final string that Click writes to stderr.
        Includes:
        * emoji + main message (bold)
        * optional hint on a new line (dim colour)
        """
        lines = [f"{self.emoji}  {click.style(self.message, fg='red', bold=True)}"]
        if self.hint:
            lines.append(click.style(f"💡 {self.hint}", fg='yellow'))
        return "\n".join(lines)

    def show(self, file=None) -> None:
        click.echo(self.formatted_message, err=True, file=file)


class InvalidArgumentsError(PengError):
    """Raised when a tool call is missing required fields or has mistyped ones."""
    emoji = "⚠️"

    def __init__(self, tool_name: str, details: str | None = None):
        hint = details
        super().__init__(f"Invalid arguments for {tool_name}", hint)
        self.tool_name = tool_name


class MissingArgumentsError(PengError):
    """Raised when a tool call carries no arguments at all."""
    emoji = "⚠️"

    def __init__(self):
        super().__init__("No arguments provided")


class SessionNotFoundError(PengError):
    """Raised when a clarification session id is unknown."""
    emoji = "🔍"

    def __init__(self, session_id: str):
        hint = "Sessions live only in the running process and are removed once answered."
        super().__init__(f"Session {session_id} not found", hint)
        self.session_id = session_id


class UnknownToolError(PengError):
    """Raised when a tool name is not registered."""
    emoji = "🚫"

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.tool_name = name
