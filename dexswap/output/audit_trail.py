"""Audit trail formatter for provider calls."""

import logging
from collections import defaultdict

from ..core.models import AuditEntry

logger = logging.getLogger(__name__)


class AuditTrailFormatter:
    """Formats provider audit entries for transparency."""

    def format_summary(self, entries: list[AuditEntry]) -> str:
        """
        Format a summary of the audit trail.

        Args:
            entries: Audit entries collected from a provider

        Returns:
            Formatted string summary
        """
        lines = []
        lines.append("=" * 70)
        lines.append("AUDIT TRAIL SUMMARY")
        lines.append("=" * 70)
        lines.append("")

        if not entries:
            lines.append("  No provider calls recorded")
            return "\n".join(lines)

        lines.append("PROVIDER CALLS")
        lines.append("-" * 40)
        for action, info in self._summarize_actions(entries).items():
            status = "OK" if info["failed"] == 0 else "FAILED"
            lines.append(f"  {action}: {status}")
            lines.append(f"    - Calls: {info['total']} ({info['total'] - info['failed']} successful)")
        lines.append("")

        lines.append("CALL LOG")
        lines.append("-" * 40)
        for entry in entries:
            lines.append(f"  {self._format_entry(entry)}")

        return "\n".join(lines)

    def _summarize_actions(self, entries: list[AuditEntry]) -> dict[str, dict[str, int]]:
        summary: dict[str, dict[str, int]] = defaultdict(lambda: {"total": 0, "failed": 0})
        for entry in entries:
            key = f"{entry.provider}.{entry.action}"
            summary[key]["total"] += 1
            if not entry.success:
                summary[key]["failed"] += 1
        return dict(summary)

    def _format_entry(self, entry: AuditEntry) -> str:
        status = "ok" if entry.success else "FAILED"
        parts = [
            entry.timestamp.strftime("%H:%M:%S"),
            f"{entry.provider}.{entry.action}",
            status,
        ]
        if entry.duration_ms is not None:
            parts.append(f"{entry.duration_ms}ms")
        if entry.error_message:
            parts.append(entry.error_message)
        elif entry.notes:
            parts.append(entry.notes)
        return " | ".join(parts)

    def format_to_file(self, entries: list[AuditEntry], filepath: str) -> None:
        """Write the audit summary to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_summary(entries))
