"""
Prompt templates for narrative commentary.
"""

import json
from enum import Enum
from typing import Any


class ScenarioKind(str, Enum):
    """Scenario a snapshot was produced by."""
    TRANSLATION = "translation"
    RAG = "rag"
    ROI = "roi"


def _dump(data: Any) -> str:
    return json.dumps(data, default=str)


def scenario_prompt(scenario: ScenarioKind, snapshot: Any) -> str:
    """Analysis prompt for a scenario snapshot."""
    if scenario is ScenarioKind.TRANSLATION:
        return (
            f"You are a strategic business advisor. Interpret these AI translation economics: {_dump(snapshot)}.\n"
            "Write exactly ONE short paragraph (4-5 lines max).\n"
            "Tone: calm, neutral, and trust-worthy.\n"
            "Constraint: Use plain, simple business language.\n"
            "Constraint: Do NOT use jargon (avoid: scalable utility, decoupling, infrastructure asset, "
            "proportional, leverage).\n"
            "Constraint: Do NOT include any numbers or prices.\n"
            "Message: Explain that AI translation base costs are low and grow efficiently as volume increases.\n"
            "Message: Note that human review is an optional extra layer for accuracy that can be used where needed.\n"
            "Message: Emphasize that this setup allows teams to choose their own balance of speed and quality."
        )
    if scenario is ScenarioKind.RAG:
        return (
            f'You are an AI Product Leader. Generate a "Simple Decision Brief" for this RAG scenario: '
            f"{_dump(snapshot)}.\n"
            "Write exactly THREE short paragraphs.\n"
            "Tone: executive, direct, neutral. Use plain business language.\n"
            "Constraint: Do NOT use strategy jargon or academic phrasing.\n"
            "Constraint: Do NOT use long sentences.\n\n"
            "Paragraph 1: Explain what the model is showing in simple terms (setup vs ongoing).\n"
            "Paragraph 2: Explain why governance (review, tuning, monitoring) dominates cost over time "
            "instead of model tokens.\n"
            "Paragraph 3: Explain when a RAG system makes sense (large doc base, frequent questions, accuracy needs)."
        )
    return (
        f"Provide a quick decision summary for: productivity ROI. Data: {_dump(snapshot)}. "
        "Format as: **ROI Signal**: ... **Optimization**: ... **Scaling Risk**: ..."
    )


def executive_summary_prompt(projection: Any) -> str:
    return (
        "You are an AI Economics Advisor. Interpret the strategic business value of this 12-month ROI data: "
        f"{_dump(projection)}. Write one concise paragraph. Emphasize productivity gains over revenue hype. "
        "Tone: executive."
    )


def graph_insight_prompt(projection: Any) -> str:
    return (
        f"Describe visual trends in this ROI data for a line chart: {_dump(projection)}. "
        "One short paragraph focusing on slopes and the break-even gap. Neutral tone."
    )


def monthly_narrative_prompt(projection: Any) -> str:
    return f"Generate month-by-month ROI insights for: {_dump(projection)}. Format: Month X: <insight>."
