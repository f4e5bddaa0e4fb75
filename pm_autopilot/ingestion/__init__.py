"""
Customer feedback ingestion from shared spreadsheets.
"""

from pm_autopilot.ingestion.sheet_parser import build_export_url, parse_feedback_csv
from pm_autopilot.ingestion.sheet_reader import SheetReader

__all__ = ["SheetReader", "build_export_url", "parse_feedback_csv"]
