"""
Race results module.

Usage:
    from race_reports.features.results import normalize_file, analyze
    from race_reports.features.results import ResultsService

Available components:
- normalize_rows / normalize_file: raw rows → NormalizedRecord
- build_analysis_report / analyze: records → AnalysisReport
- ingest_rows: raw rows → IngestedResult (rows without chip time dropped)
- ResultsService: saved reports, race ingestion, rankings
"""
from .exceptions import (
    ResultsError,
    ResultsFileError,
    InvalidDistanceError,
    NoValidResultsError,
    RaceNotFoundError,
    ReportNotFoundError,
)
from .records import NormalizedRecord, IngestedResult, IngestionResult
from .normalizer import ValidityPolicy, NormalizationResult, normalize_row, normalize_rows
from .ingestion import ingest_rows
from .stats import build_analysis_report, is_valid_for_analysis
from .schemas import AnalysisReport, ReportMetadata, ReportSummary, StoredReport
from .csv_io import read_results_csv, write_normalized_csv
from .service import ResultsService, analyze, normalize_file, validate_distance

__all__ = [
    # Errors
    "ResultsError",
    "ResultsFileError",
    "InvalidDistanceError",
    "NoValidResultsError",
    "RaceNotFoundError",
    "ReportNotFoundError",
    # Records
    "NormalizedRecord",
    "IngestedResult",
    "IngestionResult",
    # Normalization
    "ValidityPolicy",
    "NormalizationResult",
    "normalize_row",
    "normalize_rows",
    "ingest_rows",
    # Analysis
    "build_analysis_report",
    "is_valid_for_analysis",
    "AnalysisReport",
    "ReportMetadata",
    "ReportSummary",
    "StoredReport",
    # IO
    "read_results_csv",
    "write_normalized_csv",
    # Service
    "ResultsService",
    "analyze",
    "normalize_file",
    "validate_distance",
]
