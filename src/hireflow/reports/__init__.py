"""
Report rendering.
"""

from hireflow.reports.pdf_report import PDFReportRenderer, render_interview_pdf, report_filename

__all__ = ["PDFReportRenderer", "render_interview_pdf", "report_filename"]
