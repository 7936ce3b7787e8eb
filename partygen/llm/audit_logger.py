"""LLM audit logging for prompt/response debugging.

Provides filesystem-based logging of every content generation call for
debugging and prompt improvement. Logs are written as markdown files
organized by content kind.
"""

import asyncio
import contextvars
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from partygen.llm.response_types import LLMResponse


@dataclass
class LLMAuditContext:
    """Context for an LLM audit log entry.

    Attributes:
        kind: Content kind being generated (None for orphan calls).
        fingerprint: Fingerprint of the request being served.
        attempt: 1-based attempt number within the retry loop.
    """

    kind: str | None = None
    fingerprint: str | None = None
    attempt: int = 0


@dataclass
class LLMAuditEntry:
    """Complete audit entry for an LLM call.

    Attributes:
        timestamp: When the call was made.
        context: Kind/fingerprint/attempt context.
        provider: LLM provider name (e.g., "gemini").
        model: Model used for the call.
        schema_name: Name of the requested output schema.
        system_prompt: System prompt if provided.
        messages: List of message dicts.
        parameters: Call parameters (max_tokens, temperature, etc.).
        response: LLM response if successful.
        error: Error message if failed.
        duration_seconds: Time taken for the call.
    """

    timestamp: datetime
    context: LLMAuditContext
    provider: str
    model: str
    schema_name: str
    system_prompt: str | None
    messages: list[dict[str, Any]]
    parameters: dict[str, Any]
    response: LLMResponse | None
    error: str | None
    duration_seconds: float


class LLMAuditLogger:
    """Async audit logger for LLM calls.

    Writes audit logs as markdown files to the filesystem, one directory
    per content kind.

    Args:
        log_dir: Directory to write log files to.
        enabled: Whether logging is enabled.
    """

    def __init__(
        self,
        log_dir: Path | str = "logs/llm",
        enabled: bool = True,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.enabled = enabled

    async def log(self, entry: LLMAuditEntry) -> None:
        """Log an audit entry asynchronously.

        Args:
            entry: The audit entry to log.
        """
        if not self.enabled:
            return

        file_path = self._get_file_path(entry)
        content = self._format_entry(entry)

        await self._write_async(file_path, content)

    def _get_file_path(self, entry: LLMAuditEntry) -> Path:
        """Generate file path for audit entry.

        Args:
            entry: The audit entry.

        Returns:
            Path to the log file.
        """
        timestamp_str = entry.timestamp.strftime("%Y%m%d_%H%M%S_%f")

        if entry.context.kind is not None:
            kind_dir = self.log_dir / entry.context.kind
            filename = f"{timestamp_str}_attempt_{entry.context.attempt}.md"
        else:
            kind_dir = self.log_dir / "orphan"
            filename = f"{timestamp_str}.md"

        return kind_dir / filename

    def _format_entry(self, entry: LLMAuditEntry) -> str:
        """Format entry as markdown.

        Args:
            entry: The audit entry to format.

        Returns:
            Markdown-formatted string.
        """
        lines = [f"# Content Generation: {entry.context.kind or 'unknown'}", ""]

        lines.append("## Metadata")
        lines.append(f"- **Timestamp**: {entry.timestamp.isoformat()}")
        if entry.context.fingerprint is not None:
            lines.append(f"- **Fingerprint**: {entry.context.fingerprint}")
        if entry.context.attempt:
            lines.append(f"- **Attempt**: {entry.context.attempt}")
        lines.append(f"- **Provider**: {entry.provider}")
        lines.append(f"- **Model**: {entry.model}")
        lines.append(f"- **Schema**: {entry.schema_name}")
        lines.append("")

        if entry.parameters:
            lines.append("## Parameters")
            for key, value in entry.parameters.items():
                lines.append(f"- **{key}**: {value}")
            lines.append("")

        if entry.system_prompt:
            lines.append("## System Prompt")
            lines.append("```")
            lines.append(entry.system_prompt)
            lines.append("```")
            lines.append("")

        if entry.messages:
            lines.append("## Messages")
            for msg in entry.messages:
                role = msg.get("role", "unknown").upper()
                lines.append(f"### [{role}]")
                lines.append("```")
                lines.append(msg.get("content", ""))
                lines.append("```")
                lines.append("")

        if entry.error:
            lines.append("## Error")
            lines.append("```")
            lines.append(entry.error)
            lines.append("```")
            lines.append("")

        if entry.response:
            lines.append("## Response")
            lines.append("```json")
            if entry.response.parsed_content is not None:
                lines.append(json.dumps(entry.response.parsed_content, indent=2, ensure_ascii=False))
            else:
                lines.append(entry.response.content)
            lines.append("```")
            lines.append("")

            if entry.response.usage:
                usage = entry.response.usage
                lines.append("## Usage")
                lines.append(f"- **Prompt Tokens**: {usage.prompt_tokens}")
                lines.append(f"- **Completion Tokens**: {usage.completion_tokens}")
                lines.append(f"- **Total Tokens**: {usage.total_tokens}")
                lines.append("")

        lines.append("## Duration")
        lines.append(f"- **Total Time**: {entry.duration_seconds:.2f}s")
        lines.append("")

        return "\n".join(lines)

    async def _write_async(self, path: Path, content: str) -> None:
        """Write content to file asynchronously.

        Args:
            path: Path to write to.
            content: Content to write.
        """

        def write_file() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        await asyncio.to_thread(write_file)


# Context variable for tracking the request being generated
_audit_context: contextvars.ContextVar[LLMAuditContext] = contextvars.ContextVar(
    "audit_context",
    default=LLMAuditContext(),
)


def set_audit_context(
    kind: str | None = None,
    fingerprint: str | None = None,
    attempt: int = 0,
) -> None:
    """Set audit context for subsequent LLM calls.

    Args:
        kind: Content kind being generated.
        fingerprint: Fingerprint of the request.
        attempt: Attempt number within the retry loop.
    """
    _audit_context.set(
        LLMAuditContext(
            kind=kind,
            fingerprint=fingerprint,
            attempt=attempt,
        )
    )


def get_audit_context() -> LLMAuditContext:
    """Get current audit context.

    Returns:
        Current LLMAuditContext.
    """
    return _audit_context.get()


# Global logger instance
_audit_logger: LLMAuditLogger | None = None


def get_audit_logger() -> LLMAuditLogger:
    """Get or create global audit logger.

    Returns:
        LLMAuditLogger instance.
    """
    global _audit_logger
    if _audit_logger is None:
        from partygen.config import settings

        _audit_logger = LLMAuditLogger(
            log_dir=settings.llm_log_dir,
            enabled=settings.log_llm_calls,
        )
    return _audit_logger
