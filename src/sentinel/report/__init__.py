"""
SAR draft composition
"""

from .compositor import ReportCompositor, SARDraft, SARReportCompositor

__all__ = ["ReportCompositor", "SARDraft", "SARReportCompositor"]
