"""
Tests for report schemas and lenient loading of stored reports.
"""

import math

from race_reports.features.results.schemas import (
    AnalysisReport,
    PercentileRow,
    ReportMetadata,
    SummaryStatRow,
)


# =============================================================================
# Test AnalysisReport
# =============================================================================

class TestAnalysisReportFromStored:
    """Tests for AnalysisReport.from_stored."""

    def test_round_trip(self):
        report = AnalysisReport(
            percentile_rows=[PercentileRow(label="Min", masculino="00:04:00")],
            summary_stats_rows=[SummaryStatRow(label="split 5K", count=3, avg_pace="00:05:00")],
        )
        loaded = AnalysisReport.from_stored(report.to_json_dict())
        assert loaded == report

    def test_missing_groups_default_to_empty(self):
        loaded = AnalysisReport.from_stored({"summaryStatsRows": []})
        assert loaded.percentile_rows == []
        assert loaded.pace_distribution_totals.label == "Total"
        assert loaded.scatter_data_genero.data_m == []

    def test_ill_typed_group_dropped(self):
        raw = {
            "percentileRows": "not a list",
            "summaryStatsRows": [{"label": "split 5K", "count": 2, "avgPace": "00:05:00"}],
        }
        loaded = AnalysisReport.from_stored(raw)
        assert loaded.percentile_rows == []
        assert loaded.summary_stats_rows[0].count == 2

    def test_not_a_dict(self):
        assert AnalysisReport.from_stored(None) == AnalysisReport()
        assert AnalysisReport.from_stored([1, 2]) == AnalysisReport()

    def test_reports_without_version_load(self):
        """Blobs saved before versioning get the current version."""
        loaded = AnalysisReport.from_stored({"scatterData": [{"x": 5, "y": 300}]})
        assert loaded.schema_version == 1
        assert loaded.scatter_data[0].y == 300

    def test_missing_percentile_cell_defaults_to_dash(self):
        loaded = AnalysisReport.from_stored({"percentileRows": [{"label": "Min"}]})
        assert loaded.percentile_rows[0].femenino == "-"


# =============================================================================
# Test ReportMetadata
# =============================================================================

class TestReportMetadata:
    """Tests for ReportMetadata.from_stored."""

    def test_full(self):
        metadata = ReportMetadata.from_stored(
            {"fileName": "maraton.csv", "distanceKm": 42.195, "rowCount": 1500}
        )
        assert metadata.file_name == "maraton.csv"
        assert metadata.distance_km == 42.195
        assert metadata.row_count == 1500

    def test_row_count_truncated(self):
        metadata = ReportMetadata.from_stored({"rowCount": 10.9})
        assert metadata.row_count == 10

    def test_ill_typed_values_dropped(self):
        metadata = ReportMetadata.from_stored(
            {"fileName": "a.csv", "distanceKm": "42", "rowCount": math.nan}
        )
        assert metadata.file_name == "a.csv"
        assert metadata.distance_km is None
        assert metadata.row_count is None

    def test_nothing_usable_is_none(self):
        assert ReportMetadata.from_stored({"fileName": 5, "rowCount": True}) is None
        assert ReportMetadata.from_stored({}) is None
        assert ReportMetadata.from_stored("maraton.csv") is None

    def test_json_keys(self):
        metadata = ReportMetadata(file_name="a.csv", distance_km=10, row_count=3)
        assert metadata.to_json_dict() == {"fileName": "a.csv", "distanceKm": 10.0, "rowCount": 3}
