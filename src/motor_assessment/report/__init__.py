"""Report generation for assessment sessions."""

from .generator import SESSION_REPORT_TEMPLATE, SessionReportGenerator, generate_session_report

__all__ = [
    "SESSION_REPORT_TEMPLATE",
    "SessionReportGenerator",
    "generate_session_report",
]
