"""Exam performance analysis engines."""

from engines.analysis import AnalysisReport, analyze
from engines.records import ExamRecord, SubjectScore

__all__ = ["AnalysisReport", "ExamRecord", "SubjectScore", "analyze"]
