from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Protocol

from ..models.comparison_result import ComparisonResult
from ..models.config_models import SUBTOTAL_LABEL, SummaryConfig

logger = logging.getLogger(__name__)

"""Optional natural-language summary of a comparison.

The summary is produced by a language model behind the SummaryClient
protocol. A client is built per call through an injected factory; nothing
here keeps a client or credential around between calls. The default factory
talks to the OpenAI API with the key from OPENAI_API_KEY.
"""

__all__ = [
    "SummaryError",
    "SummaryClient",
    "OpenAISummaryClient",
    "openai_client_factory",
    "build_summary_prompt",
    "attach_ai_summary",
]

API_KEY_ENV = "OPENAI_API_KEY"


class SummaryError(Exception):
    """Raised when a summary could not be produced."""


class SummaryClient(Protocol):
    def generate(self, prompt: str, *, model: str) -> str: ...


class OpenAISummaryClient:
    """SummaryClient backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str) -> None:
        from openai import OpenAI

        self._client = OpenAI(api_key=api_key)

    def generate(self, prompt: str, *, model: str) -> str:
        from openai import OpenAIError

        try:
            r = self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
            )
        except OpenAIError as e:
            raise SummaryError(f"summary request failed: {e}") from e
        return (r.choices[0].message.content or "").strip()


def openai_client_factory(api_key: str | None = None) -> SummaryClient:
    key = api_key or os.getenv(API_KEY_ENV)
    if not key:
        raise SummaryError(f"missing API key: set {API_KEY_ENV}")
    return OpenAISummaryClient(key)


def build_summary_prompt(
    result: ComparisonResult,
    *,
    max_changes: int = 15,
    subtotal_label: str = SUBTOTAL_LABEL,
    language: str = "Traditional Chinese",
) -> str:
    """Prompt listing the partition counts and the first max_changes modified rows."""
    counts = result.counts
    lines = [
        "I compared two sales ledger spreadsheet exports. Summary of differences:",
        f"- Modified rows: {counts['modified']}",
        f"- Added rows: {counts['added']}",
        f"- Removed rows: {counts['removed']}",
        "",
        f"Notable changes (first {max_changes}):",
    ]
    for diff in result.modified[:max_changes]:
        changes = ", ".join(f"{c.column} from {c.old_value} to {c.new_value}" for c in diff.changes)
        lines.append(f"- [{diff.id}] {diff.project_name or subtotal_label}: {changes}")
    lines += [
        "",
        "As a senior business analyst, write a concise executive summary in "
        f"{language}. Focus on what these changes (quantity changes, status "
        "changes) may mean for the business.",
    ]
    return "\n".join(lines)


def attach_ai_summary(
    result: ComparisonResult,
    client_factory: Callable[[], SummaryClient] = openai_client_factory,
    *,
    config: SummaryConfig | None = None,
    subtotal_label: str = SUBTOTAL_LABEL,
) -> ComparisonResult:
    """Return a copy of result with a generated summary attached.

    Raises:
        SummaryError: client construction or the request failed, or the model
            returned nothing
    """
    config = config or SummaryConfig()
    prompt = build_summary_prompt(
        result,
        max_changes=config.max_changes,
        subtotal_label=subtotal_label,
        language=config.language,
    )
    client = client_factory()
    logger.debug(f"requesting summary model={config.model} prompt_chars={len(prompt)}")
    text = client.generate(prompt, model=config.model)
    if not text:
        raise SummaryError("summary response was empty")
    return result.with_summary(text)
