"""Audit trail of scope commands."""

from .audit import AuditEvent, JsonlAuditLogger, summarize_arguments, utc_timestamp

__all__ = ["AuditEvent", "JsonlAuditLogger", "summarize_arguments", "utc_timestamp"]
