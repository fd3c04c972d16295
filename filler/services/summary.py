from __future__ import annotations

from ..models.generation_result import GenerationResult

"""Summary rendering for a finished batch run.

Two renderings of the same GenerationResult: the machine-greppable SUMMARY
line logged at the end of a CLI run, and the short human message shown
above the error list.
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "render_result_message",
]


def format_seconds(seconds: float) -> str:
    """Compact elapsed time: integers without decimals, no scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: GenerationResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY records={records} groups={groups} success={success} errors={errors} elapsed_sec={elapsed}

    Examples:
        >>> render_summary_line(GenerationResult(success_count=5, total_records=5, total_groups=2))
        'SUMMARY records=5 groups=2 success=5 errors=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY records={result.total_records} "
        f"groups={result.total_groups} "
        f"success={result.success_count} "
        f"errors={len(result.error_records)} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def render_result_message(result: GenerationResult) -> str:
    """e.g. 'Generated 5 PDFs in out/. 0 errors.'"""
    where = f" in {result.location}" if result.location else ""
    return f"Generated {result.success_count} PDFs{where}. {len(result.error_records)} errors."
