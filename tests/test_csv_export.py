"""
Unit tests for the translation CSV export.
"""

import csv

from ai_economics_navigator.core.translation import TranslationParameters, compute_translation_costs
from ai_economics_navigator.export import render_translation_csv, translation_rows, write_translation_csv


def export_params(**overrides) -> TranslationParameters:
    values = dict(
        model_id="gemini-3-pro",
        characters_per_document=2000,
        document_count=1000,
        monthly_growth_percent=10,
        language_multiplier=3,
        quality_tier="none",
    )
    values.update(overrides)
    return TranslationParameters(**values)


class TestTranslationRows:
    """Test export rows."""

    def test_row_order(self):
        params = export_params()
        rows = translation_rows(params, compute_translation_costs(params))
        assert [metric for metric, _ in rows] == [
            "AI Model",
            "Language Scope",
            "Document Volume",
            "Chars per Document",
            "Monthly Growth %",
            "Quality Tier",
            "Initial Setup Cost",
            "Monthly Recurring Cost",
            "Year-1 Cumulative Spend",
            "Total Initial Characters",
        ]

    def test_row_values(self):
        params = export_params()
        rows = dict(translation_rows(params, compute_translation_costs(params)))

        assert rows["AI Model"] == "Gemini 3 Pro"
        assert rows["Language Scope"] == "3 language(s)"
        assert rows["Document Volume"] == "1000"
        assert rows["Chars per Document"] == "2000"
        assert rows["Monthly Growth %"] == "10"
        assert rows["Quality Tier"] == "none"
        # 6M chars at $0.015 per 1k
        assert rows["Initial Setup Cost"] == "90.00"
        assert rows["Monthly Recurring Cost"] == "9.00"
        assert rows["Year-1 Cumulative Spend"] == "189.00"
        assert rows["Total Initial Characters"] == "6000000"

    def test_fractional_growth(self):
        params = export_params(monthly_growth_percent="2.5")
        rows = dict(translation_rows(params, compute_translation_costs(params)))
        assert rows["Monthly Growth %"] == "2.5"

    def test_unknown_model_uses_raw_id(self):
        params = export_params(model_id="in-house-mt", base_cost_per_thousand_chars=0.01)
        rows = dict(translation_rows(params, compute_translation_costs(params)))
        assert rows["AI Model"] == "in-house-mt"


class TestCsvOutput:
    """Test CSV rendering and writing."""

    def test_render_has_header(self):
        params = export_params()
        text = render_translation_csv(params, compute_translation_costs(params))
        assert text.splitlines()[0] == "Metric,Value"
        assert "Language Scope,3 language(s)" in text

    def test_write_file(self, tmp_path):
        params = export_params()
        output = write_translation_csv(tmp_path / "estimate.csv", params, compute_translation_costs(params))

        assert output.exists()
        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Metric", "Value"]
        assert len(rows) == 11
        assert rows[-1] == ["Total Initial Characters", "6000000"]

    def test_display_name_with_spaces_is_quoted_safely(self, tmp_path):
        params = export_params(model_id="claude-3-sonnet")
        output = write_translation_csv(str(tmp_path / "estimate.csv"), params, compute_translation_costs(params))
        with open(output, newline="", encoding="utf-8") as f:
            rows = dict(csv.reader(f))
        assert rows["AI Model"] == "Claude 3.5 Sonnet"
