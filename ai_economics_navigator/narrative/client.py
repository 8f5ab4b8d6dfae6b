"""
Narrative client backed by OpenAI chat completions.

Provider errors never reach the caller: rate limiting is retried with
exponential backoff, and every failure is mapped to a fixed user-facing
string (or to an empty string for decorative narrations).
"""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

from openai import OpenAI, RateLimitError

from .prompts import (
    ScenarioKind,
    executive_summary_prompt,
    graph_insight_prompt,
    monthly_narrative_prompt,
    scenario_prompt,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY_SECONDS = 1.0

RATE_LIMIT_MESSAGE = "Insight temporarily unavailable due to API limits. Please try again shortly."
GENERIC_FAILURE_MESSAGE = "Analysis could not be generated right now. Please retry."
EMPTY_ANALYSIS_MESSAGE = "Analysis complete but no text returned."
EMPTY_INSIGHT_MESSAGE = "Insight generated."


def is_rate_limit_error(error: BaseException) -> bool:
    """Whether an error means the provider is rate limiting us."""
    if isinstance(error, RateLimitError):
        return True
    if getattr(error, "status_code", None) == 429 or getattr(error, "status", None) == 429:
        return True
    text = str(error)
    return "429" in text or "RESOURCE_EXHAUSTED" in text


def format_error(error: BaseException) -> str:
    """Map any error to a safe, non-technical message."""
    if is_rate_limit_error(error):
        return RATE_LIMIT_MESSAGE
    return GENERIC_FAILURE_MESSAGE


def with_retry(
    fn: Callable[[], T],
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``fn``, retrying only rate-limit errors with doubling delay.

    Args:
        fn: Zero-argument callable performing the request
        retries: Additional attempts allowed after the first
        delay: Seconds to wait before the first retry
        sleep: Sleep function (injectable for tests)

    Raises:
        The last error when it is not a rate limit or retries are exhausted
    """
    while True:
        try:
            return fn()
        except Exception as e:
            if retries <= 0 or not is_rate_limit_error(e):
                raise
            logger.info("Rate limited, retrying in %.1fs (%d left)", delay, retries)
            sleep(delay)
            retries -= 1
            delay *= 2


class NarrativeClient:
    """Generates commentary for engine snapshots.

    The returned text is passed through unchanged; any structure in it
    (e.g. "**Label**: text" lines) is for the presentation layer to parse.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize narrative client.

        Args:
            model: Chat model name (required)
            client: Pre-built OpenAI client; one is created when omitted
            retries: Additional attempts on rate limiting
            retry_delay: Seconds before the first retry, doubled each time
            sleep: Sleep function (injectable for tests)

        Raises:
            ValueError: If model is missing/empty
        """
        if not model or not model.strip():
            raise ValueError("model is required and cannot be empty")

        self.model = model
        self.retries = retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self.client = client if client is not None else OpenAI()

    def _complete(self, prompt: str) -> str:
        def call():
            return self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )

        response = with_retry(call, self.retries, self.retry_delay, self._sleep)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def generate_commentary(self, scenario: ScenarioKind, snapshot: Any) -> str:
        """Commentary for a scenario snapshot.

        ROI snapshots that are a projection series get the executive summary;
        every other snapshot gets the scenario analysis.
        """
        scenario = ScenarioKind(scenario)
        if scenario is ScenarioKind.ROI and isinstance(snapshot, list):
            return self.executive_summary(snapshot)
        return self.analyze_scenario(scenario, snapshot)

    def analyze_scenario(self, scenario: ScenarioKind, snapshot: Any) -> str:
        """Scenario analysis text, or a fixed failure message."""
        try:
            text = self._complete(scenario_prompt(ScenarioKind(scenario), snapshot))
            return text or EMPTY_ANALYSIS_MESSAGE
        except Exception as e:
            logger.warning("Narrative analysis failed for %s", scenario, exc_info=True)
            return format_error(e)

    def executive_summary(self, projection: Any) -> str:
        """ROI executive insight, or a fixed failure message."""
        try:
            text = self._complete(executive_summary_prompt(projection))
            return text or EMPTY_INSIGHT_MESSAGE
        except Exception as e:
            logger.warning("Narrative executive summary failed", exc_info=True)
            return format_error(e)

    def graph_insight(self, projection: Any) -> str:
        """Chart trend description; empty string on any failure."""
        try:
            return self._complete(graph_insight_prompt(projection))
        except Exception:
            logger.debug("Graph insight unavailable", exc_info=True)
            return ""

    def monthly_narrative(self, projection: Any) -> str:
        """Month-by-month narration; empty string on any failure."""
        try:
            return self._complete(monthly_narrative_prompt(projection))
        except Exception:
            logger.debug("Monthly narrative unavailable", exc_info=True)
            return ""
