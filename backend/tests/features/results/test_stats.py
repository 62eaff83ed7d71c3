"""
Tests for the statistics aggregator.

Records are built directly as NormalizedRecord so each test controls the
exact column values.
"""

import pytest

from race_reports.shared.constants import (
    CHECKPOINTS,
    PACE_COLUMNS,
    SPLIT_COLUMNS,
    SPLIT_LABELS,
    CanonicalField,
)
from race_reports.shared.durations import format_hhmmss
from race_reports.features.results.records import NormalizedRecord
from race_reports.features.results.schemas import GenderSummaryStatRow, SummaryStatRow
from race_reports.features.results.stats import (
    PERCENTILE_POINTS,
    average_pace,
    build_analysis_report,
    build_gender_scatter,
    build_scatter_series,
    compute_category_stats,
    compute_gender_summary_by_category,
    compute_gender_summary_stats,
    compute_pace_distribution,
    compute_percentiles_by_gender,
    compute_summary_stats,
    is_valid_for_analysis,
    pace_distribution_totals,
    pick_percentile,
)

F = CanonicalField


# =============================================================================
# Helpers
# =============================================================================

def make_record(
    genero="Masculino",
    pace=300,
    categoria="Open",
    chip=12660,
    splits_upto=42,
    checkpoint_pace=None,
):
    """
    Record with chip time, average pace and checkpoints up to `splits_upto` km.

    Checkpoints beyond `splits_upto` stay at zero.
    """
    values = {
        F.GENERO.value: genero,
        F.CATEGORIA.value: categoria,
        F.RITMO_MEDIO.value: format_hhmmss(pace),
        F.TIEMPO_CHIP.value: format_hhmmss(chip),
    }
    for km, split_col, pace_col in zip(CHECKPOINTS, SPLIT_COLUMNS, PACE_COLUMNS):
        if km <= splits_upto:
            values[split_col.value] = format_hhmmss(km * pace)
            values[pace_col.value] = format_hhmmss(checkpoint_pace or pace)
        else:
            values[split_col.value] = "00:00:00"
            values[pace_col.value] = "00:00:00"
    return NormalizedRecord(values)


# =============================================================================
# Test helpers
# =============================================================================

class TestPickPercentile:
    """Tests for pick_percentile."""

    def test_bounds(self):
        values = [10, 20, 30, 40]
        assert pick_percentile(values, 0) == 10
        assert pick_percentile(values, 1.0) == 40

    def test_nearest_rank(self):
        values = list(range(1, 101))
        assert pick_percentile(values, 0.01) == 1
        assert pick_percentile(values, 0.5) == 50
        assert pick_percentile(values, 0.8) == 80

    def test_small_list(self):
        assert pick_percentile([7], 0.3) == 7
        assert pick_percentile([5, 9], 0.5) == 5

    def test_monotonic(self):
        values = sorted([300, 250, 410, 275, 333, 290, 512])
        picks = [pick_percentile(values, p) for _, p in PERCENTILE_POINTS]
        assert picks == sorted(picks)

    def test_empty(self):
        assert pick_percentile([], 0.5) == 0


class TestAveragePace:
    """Tests for average_pace."""

    def test_mean(self):
        records = [make_record(pace=300), make_record(pace=301)]
        assert average_pace(records, F.RITMO_MEDIO) == "00:05:01"

    def test_empty(self):
        assert average_pace([], F.RITMO_MEDIO) == "00:00:00"


class TestIsValidForAnalysis:
    """Tests for is_valid_for_analysis."""

    def test_full_finisher(self):
        assert is_valid_for_analysis(make_record())

    def test_missing_split(self):
        assert not is_valid_for_analysis(make_record(splits_upto=40))

    def test_missing_chip_time(self):
        assert not is_valid_for_analysis(make_record(chip=0))


# =============================================================================
# Test percentiles
# =============================================================================

class TestPercentiles:
    """Tests for compute_percentiles_by_gender."""

    def test_labels_and_values(self):
        records = [make_record("Masculino", pace) for pace in (240, 260, 280, 300)]
        records.append(make_record("Femenino", 330))
        rows = compute_percentiles_by_gender(records)

        assert [r.label for r in rows] == ["Min", "1%", "5%", "10%", "30%", "50%", "80%", "Max"]
        assert rows[0].masculino == "00:04:00"
        assert rows[-1].masculino == "00:05:00"
        assert rows[5].masculino == "00:04:20"  # ceil(0.5 * 4) - 1 = 1
        assert all(r.femenino == "00:05:30" for r in rows)

    def test_gender_without_samples(self):
        rows = compute_percentiles_by_gender([make_record("Masculino", 300)])
        assert all(r.femenino == "-" for r in rows)

    def test_zero_pace_and_x_ignored(self):
        records = [
            make_record("Femenino", 0),
            make_record("X", 200),
            make_record("Femenino", 310),
        ]
        rows = compute_percentiles_by_gender(records)
        assert rows[0].femenino == "00:05:10"
        assert rows[0].masculino == "-"


# =============================================================================
# Test pace distribution
# =============================================================================

class TestPaceDistribution:
    """Tests for compute_pace_distribution."""

    def test_buckets_by_gender(self):
        records = [
            make_record("Masculino", 200),
            make_record("Masculino", 210),
            make_record("Femenino", 211),
            make_record("X", 600),
        ]
        rows = compute_pace_distribution(records)
        assert len(rows) == 11
        assert (rows[0].label, rows[0].m, rows[0].f) == ("≤ 03:30", 2, 0)
        assert (rows[1].label, rows[1].f) == ("03:31–03:45", 1)
        assert (rows[-1].label, rows[-1].x) == ("≥ 08:29", 1)

    def test_only_full_finishers(self):
        records = [
            make_record("Masculino", 300),
            make_record("Masculino", 300, splits_upto=35),
            make_record("Femenino", 300, chip=0),
        ]
        totals = pace_distribution_totals(compute_pace_distribution(records))
        assert (totals.m, totals.f, totals.x) == (1, 0, 0)

    def test_totals_match_filter(self):
        records = [
            make_record(g, pace, splits_upto=upto)
            for g, pace, upto in [
                ("Masculino", 230, 42), ("Femenino", 290, 42), ("X", 400, 42),
                ("Femenino", 500, 21), ("Masculino", 350, 42), ("Femenino", 700, 42),
            ]
        ]
        totals = pace_distribution_totals(compute_pace_distribution(records))
        assert totals.label == "Total"
        assert totals.m + totals.f + totals.x == sum(map(is_valid_for_analysis, records))


# =============================================================================
# Test progressive summaries
# =============================================================================

class TestSummaryStats:
    """Tests for compute_summary_stats / compute_gender_summary_stats."""

    def test_labels(self):
        rows = compute_summary_stats([make_record()])
        assert [r.label for r in rows] == [
            "Con Tiempo Chip dif 0",
            "Con todos los Split y TC",
            *SPLIT_LABELS,
        ]

    def test_subsets_never_grow(self):
        records = [make_record(splits_upto=km) for km in (5, 10, 21, 30, 42, 42)]
        counts = [r.count for r in compute_summary_stats(records)[2:]]
        assert counts == sorted(counts, reverse=True)
        assert counts[0] == 6
        assert counts[-1] == 2

    def test_cumulative_not_independent(self):
        """A record missing 10 km drops out of every later checkpoint."""
        gap = make_record()
        values = dict(gap)
        values[F.RM_10KM.value] = "00:00:00"
        records = [NormalizedRecord(values), make_record()]

        by_label = {r.label: r.count for r in compute_summary_stats(records)}
        assert by_label["split 5K"] == 2
        assert by_label["split 10K"] == 1
        assert by_label["split 15K"] == 1

    def test_checkpoint_pace_column(self):
        """Checkpoint rows average that checkpoint's own pace column."""
        records = [make_record(pace=300, checkpoint_pace=280)]
        rows = compute_summary_stats(records)
        assert rows[0].avg_pace == "00:05:00"
        assert rows[2].avg_pace == "00:04:40"

    def test_preliminary_rows(self):
        records = [make_record(), make_record(chip=0), make_record(splits_upto=21)]
        rows = compute_summary_stats(records)
        assert rows[0].count == 2
        assert rows[1].count == 1

    def test_empty(self):
        rows = compute_summary_stats([])
        assert all(r.count == 0 and r.avg_pace == "00:00:00" for r in rows)

    def test_gender_split(self):
        records = [
            make_record("Masculino", 300),
            make_record("Femenino", 330),
            make_record("Femenino", 310),
            make_record("X", 200),
        ]
        row = compute_gender_summary_stats(records)[0]
        assert (row.count_m, row.count_f) == (1, 2)
        assert row.avg_pace_m == "00:05:00"
        assert row.avg_pace_f == "00:05:20"


# =============================================================================
# Test categories
# =============================================================================

class TestCategoryStats:
    """Tests for compute_category_stats / compute_gender_summary_by_category."""

    def test_grouped_and_sorted(self):
        records = [
            make_record("Masculino", 300, "M40"),
            make_record("Femenino", 320, "Élite"),
            make_record("Femenino", 340, "M40"),
            make_record("Masculino", 280, "abierta"),
        ]
        rows = compute_category_stats(records)
        assert [r.categoria for r in rows] == ["abierta", "Élite", "M40"]

        m40 = rows[2]
        assert (m40.count_m, m40.count_f) == (1, 1)
        assert m40.avg_pace_m == "00:05:00"
        assert m40.avg_pace_f == "00:05:40"

    def test_empty_category_label(self):
        rows = compute_category_stats([make_record(categoria="")], empty_label="Sin categoría")
        assert rows[0].categoria == "Sin categoría"

    def test_uses_overall_pace_only(self):
        """Category rows include partial finishers."""
        rows = compute_category_stats([make_record(splits_upto=5)])
        assert rows[0].count_m == 1

    def test_by_category_full_finishers_only(self):
        records = [
            make_record("Masculino", 300, "B"),
            make_record("Femenino", 300, "A"),
            make_record("Femenino", 300, "C", splits_upto=30),
            make_record("Femenino", 300, ""),
        ]
        by_category = compute_gender_summary_by_category(records)
        assert list(by_category) == ["A", "B"]
        assert by_category["A"][0].count_f == 1


# =============================================================================
# Test scatter
# =============================================================================

class TestScatter:
    """Tests for scatter series builders."""

    def test_series_with_start_point(self):
        rows = [
            SummaryStatRow(label="Con Tiempo Chip dif 0", count=3, avg_pace="00:05:00"),
            SummaryStatRow(label="split 10K", count=3, avg_pace="00:05:10"),
            SummaryStatRow(label="split 5K", count=3, avg_pace="00:04:50"),
            SummaryStatRow(label="split 42K", count=2, avg_pace="00:06:00"),
        ]
        points = build_scatter_series(rows)
        assert [(p.x, p.y) for p in points] == [
            (0, 290), (5, 290), (10, 310), (42.195, 360),
        ]

    def test_no_start_point_without_5k(self):
        rows = [SummaryStatRow(label="split 10K", count=1, avg_pace="00:05:10")]
        assert [(p.x, p.y) for p in build_scatter_series(rows)] == [(10, 310)]

    def test_gender_scatter(self):
        rows = [
            GenderSummaryStatRow(label="split 5K", avg_pace_m="00:04:00", avg_pace_f="00:05:00"),
        ]
        scatter = build_gender_scatter(rows)
        assert [(p.x, p.y) for p in scatter.data_m] == [(0, 240), (5, 240)]
        assert [(p.x, p.y) for p in scatter.data_f] == [(0, 300), (5, 300)]


# =============================================================================
# Test full report
# =============================================================================

class TestBuildAnalysisReport:
    """Tests for build_analysis_report."""

    def test_all_groups_filled(self):
        records = [
            make_record("Masculino", 300, "M40"),
            make_record("Femenino", 320, "F35"),
            make_record("X", 400, "Open", splits_upto=21),
        ]
        report = build_analysis_report(records)

        assert report.schema_version == 1
        assert len(report.percentile_rows) == 8
        assert len(report.pace_distribution_rows) == 11
        assert report.pace_distribution_totals.m == 1
        assert len(report.summary_stats_rows) == 12
        assert len(report.gender_summary_stats_rows) == 12
        assert {r.categoria for r in report.category_stats_rows} == {"F35", "M40", "Open"}
        assert set(report.gender_summary_stats_by_category) == {"F35", "M40"}
        assert set(report.scatter_data_by_category) == {"F35", "M40"}
        assert report.scatter_data[0].x == 0
        assert report.scatter_data[-1].x == pytest.approx(42.195)

    def test_empty_input(self):
        report = build_analysis_report([])
        assert report.pace_distribution_totals.m == 0
        assert report.category_stats_rows == []
        assert report.gender_summary_stats_by_category == {}
        assert all(r.masculino == "-" for r in report.percentile_rows)

    def test_json_keys(self):
        data = build_analysis_report([make_record()]).to_json_dict()
        assert set(data) >= {
            "schemaVersion", "percentileRows", "paceDistributionRows",
            "paceDistributionTotals", "summaryStatsRows", "genderSummaryStatsRows",
            "categoryStatsRows", "genderSummaryStatsByCategory",
            "scatterDataByCategory", "scatterData", "scatterDataGenero",
        }
        assert set(data["percentileRows"][0]) == {"label", "Masculino", "Femenino"}
        assert set(data["paceDistributionRows"][0]) == {"label", "F", "M", "X"}
        assert set(data["genderSummaryStatsRows"][0]) == {
            "label", "countM", "countF", "avgPaceM", "avgPaceF",
        }
        assert set(data["scatterDataGenero"]) == {"dataM", "dataF"}
