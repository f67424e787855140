"""Output formatting module."""

from .formatters import OutputFormatter, JSONFormatter, TableFormatter
from .audit_trail import AuditTrailFormatter

__all__ = [
    "OutputFormatter",
    "JSONFormatter",
    "TableFormatter",
    "AuditTrailFormatter",
]
