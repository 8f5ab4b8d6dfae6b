"""
CSV export for the translation scenario.

Writes a flat Metric/Value table of the inputs and headline results.
"""

import csv
import io
from pathlib import Path
from typing import List, Tuple, Union

from ai_economics_navigator.core.catalog import TRANSLATION_MODELS
from ai_economics_navigator.core.translation import TranslationParameters, TranslationResult

HEADER = ("Metric", "Value")


def _number(value: float) -> str:
    """Plain decimal rendering, dropping a trailing .0 on whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def translation_rows(params: TranslationParameters, result: TranslationResult) -> List[Tuple[str, str]]:
    """Key/value rows in export order."""
    if params.model_id in TRANSLATION_MODELS:
        model_name = TRANSLATION_MODELS.get(params.model_id).display_name
    else:
        model_name = params.model_id

    return [
        ("AI Model", model_name),
        ("Language Scope", f"{result.language_multiplier} language(s)"),
        ("Document Volume", _number(result.document_count)),
        ("Chars per Document", _number(result.characters_per_document)),
        ("Monthly Growth %", _number(result.monthly_growth_percent)),
        ("Quality Tier", result.quality_tier.value),
        ("Initial Setup Cost", f"{result.initial_total:.2f}"),
        ("Monthly Recurring Cost", f"{result.monthly_total:.2f}"),
        ("Year-1 Cumulative Spend", f"{result.total_year1:.2f}"),
        ("Total Initial Characters", f"{result.total_initial_characters:.0f}"),
    ]


def render_translation_csv(params: TranslationParameters, result: TranslationResult) -> str:
    """Render the export table as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    writer.writerows(translation_rows(params, result))
    return buffer.getvalue()


def write_translation_csv(
    path: Union[str, Path],
    params: TranslationParameters,
    result: TranslationResult,
) -> Path:
    """Write the export table to ``path``.

    Returns:
        The path written
    """
    output_path = Path(path)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(render_translation_csv(params, result))
    return output_path
