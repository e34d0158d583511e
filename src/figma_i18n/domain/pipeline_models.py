from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result object returned by the sync engine to the interface layer
and the factory functions used to build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from figma_i18n.domain.models import DiffResult

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result object of a pipeline command.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        command: Executed command name (extract, translate, update, sync).
        key_count: Number of source keys handled by the run.
        diff: Change set computed by the update command.
        languages: Target languages written during the run.
        warnings: Degraded conditions that did not stop the run.
        summary: Per-language statistics and counters.
    """
    ok: bool
    error: str
    command: str

    key_count: int = 0
    diff: Optional[DiffResult] = None
    languages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        command: str,
        error: str,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        command: Command that failed.
        error: Detailed error description.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        command=command,
        summary=summary_extra or {},
    )


def create_success_result(
        command: str,
        key_count: int,
        languages: Optional[List[str]] = None,
        diff: Optional[DiffResult] = None,
        warnings: Optional[List[str]] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a successful pipeline result instance.

    Args:
        command: Executed command.
        key_count: Number of source keys.
        languages: Target languages written.
        diff: Change set, for incremental runs.
        warnings: Non-fatal degradations encountered.
        summary_extra: Final execution metrics.

    Returns:
        PipelineResult: An immutable success result object.
    """
    return PipelineResult(
        ok=True,
        error="",
        command=command,
        key_count=key_count,
        diff=diff,
        languages=list(languages or []),
        warnings=list(warnings or []),
        summary=summary_extra or {},
    )
