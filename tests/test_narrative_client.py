"""
Unit tests for the narrative client.

Tests OpenAI client wrapper behavior, retry policy and error mapping.
"""

from unittest.mock import Mock, call, patch

import pytest

from ai_economics_navigator.narrative.client import (
    EMPTY_ANALYSIS_MESSAGE,
    EMPTY_INSIGHT_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    RATE_LIMIT_MESSAGE,
    NarrativeClient,
    format_error,
    is_rate_limit_error,
    with_retry,
)
from ai_economics_navigator.narrative.prompts import ScenarioKind


class ProviderError(Exception):
    """Stand-in for a provider error carrying an HTTP status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def make_response(content):
    """Build a chat completion response with one choice."""
    return Mock(choices=[Mock(message=Mock(content=content))])


def make_client(*side_effect, **kwargs):
    """NarrativeClient over a mocked OpenAI client."""
    openai_client = Mock()
    openai_client.chat.completions.create.side_effect = list(side_effect)
    sleep = Mock()
    client = NarrativeClient(model="gpt-4o-mini", client=openai_client, sleep=sleep, **kwargs)
    return client, openai_client, sleep


class TestErrorClassification:
    """Test rate-limit detection and message mapping."""

    def test_status_code_429(self):
        assert is_rate_limit_error(ProviderError("slow down", status_code=429))

    def test_status_attribute_429(self):
        error = Exception("quota")
        error.status = 429
        assert is_rate_limit_error(error)

    @pytest.mark.parametrize("message", ["HTTP 429 Too Many Requests", "RESOURCE_EXHAUSTED: quota"])
    def test_message_markers(self, message):
        assert is_rate_limit_error(Exception(message))

    def test_other_errors(self):
        assert not is_rate_limit_error(ProviderError("server error", status_code=500))
        assert not is_rate_limit_error(ValueError("bad input"))

    def test_format_error(self):
        assert format_error(ProviderError("x", status_code=429)) == RATE_LIMIT_MESSAGE
        assert format_error(ConnectionError("timeout")) == GENERIC_FAILURE_MESSAGE


class TestWithRetry:
    """Test the retry policy."""

    def test_success_first_try(self):
        fn = Mock(return_value="ok")
        sleep = Mock()
        assert with_retry(fn, sleep=sleep) == "ok"
        assert fn.call_count == 1
        sleep.assert_not_called()

    def test_rate_limit_backs_off_and_recovers(self):
        fn = Mock(side_effect=[ProviderError("429"), ProviderError("429"), "ok"])
        sleep = Mock()
        assert with_retry(fn, retries=2, delay=1.0, sleep=sleep) == "ok"
        assert fn.call_count == 3
        assert sleep.call_args_list == [call(1.0), call(2.0)]

    def test_rate_limit_exhausts_retries(self):
        fn = Mock(side_effect=ProviderError("limited", status_code=429))
        sleep = Mock()
        with pytest.raises(ProviderError):
            with_retry(fn, retries=2, delay=1.0, sleep=sleep)
        assert fn.call_count == 3

    def test_other_errors_are_not_retried(self):
        fn = Mock(side_effect=ProviderError("boom", status_code=500))
        sleep = Mock()
        with pytest.raises(ProviderError):
            with_retry(fn, sleep=sleep)
        assert fn.call_count == 1
        sleep.assert_not_called()


class TestNarrativeClient:
    """Test NarrativeClient wrapper."""

    @patch('ai_economics_navigator.narrative.client.OpenAI')
    def test_init_success(self, mock_openai_class):
        """Test successful initialization."""
        mock_openai_class.return_value = Mock()

        client = NarrativeClient(model="gpt-4o-mini")

        assert client.model == "gpt-4o-mini"
        assert client.retries == 2
        assert client.client is mock_openai_class.return_value

    def test_init_missing_model(self):
        """Test initialization fails with missing model."""
        with pytest.raises(ValueError, match="model is required"):
            NarrativeClient(model="", client=Mock())

        with pytest.raises(ValueError, match="model is required"):
            NarrativeClient(model=None, client=Mock())

    def test_analyze_scenario_returns_raw_text(self):
        text = "**Cost Drivers**: Storage dominates.\n**Scale**: Linear."
        client, openai_client, _ = make_client(make_response(text))

        assert client.analyze_scenario(ScenarioKind.RAG, {"setup": 50.0}) == text

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert '"setup": 50.0' in kwargs["messages"][0]["content"]

    def test_analyze_scenario_empty_text(self):
        client, _, _ = make_client(make_response(None))
        assert client.analyze_scenario(ScenarioKind.TRANSLATION, {}) == EMPTY_ANALYSIS_MESSAGE

    def test_analyze_scenario_no_choices(self):
        client, _, _ = make_client(Mock(choices=[]))
        assert client.analyze_scenario("translation", {}) == EMPTY_ANALYSIS_MESSAGE

    def test_rate_limit_retried_then_mapped(self):
        error = ProviderError("Too many", status_code=429)
        client, openai_client, sleep = make_client(error, error, error)

        assert client.analyze_scenario(ScenarioKind.ROI, {}) == RATE_LIMIT_MESSAGE
        assert openai_client.chat.completions.create.call_count == 3
        assert sleep.call_args_list == [call(1.0), call(2.0)]

    def test_rate_limit_recovers(self):
        error = ProviderError("RESOURCE_EXHAUSTED")
        client, _, sleep = make_client(error, make_response("Recovered"))

        assert client.analyze_scenario(ScenarioKind.RAG, {}) == "Recovered"
        assert sleep.call_count == 1

    def test_generic_failure(self):
        client, openai_client, sleep = make_client(ConnectionError("network down"))

        assert client.analyze_scenario(ScenarioKind.RAG, {}) == GENERIC_FAILURE_MESSAGE
        assert openai_client.chat.completions.create.call_count == 1
        sleep.assert_not_called()

    def test_retries_configurable(self):
        error = ProviderError("429")
        client, openai_client, _ = make_client(error, retries=0)

        assert client.executive_summary([]) == RATE_LIMIT_MESSAGE
        assert openai_client.chat.completions.create.call_count == 1

    def test_executive_summary_empty_text(self):
        client, _, _ = make_client(make_response(""))
        assert client.executive_summary([{"period": "Month 1"}]) == EMPTY_INSIGHT_MESSAGE

    def test_decorative_narrations_fail_silently(self):
        client, _, _ = make_client(ConnectionError("down"), ProviderError("x", status_code=500))

        assert client.graph_insight([]) == ""
        assert client.monthly_narrative([]) == ""

    def test_graph_insight_text(self):
        client, _, _ = make_client(make_response("Net gain grows steadily."))
        assert client.graph_insight([{"period": "Month 1"}]) == "Net gain grows steadily."


class TestGenerateCommentary:
    """Test routing of snapshots to prompts."""

    def test_roi_projection_gets_executive_summary(self):
        client = NarrativeClient(model="gpt-4o-mini", client=Mock())
        with patch.object(client, "executive_summary", return_value="summary") as summary:
            assert client.generate_commentary(ScenarioKind.ROI, [{"period": "Month 1"}]) == "summary"
        summary.assert_called_once()

    def test_dict_snapshot_gets_analysis(self):
        client = NarrativeClient(model="gpt-4o-mini", client=Mock())
        with patch.object(client, "analyze_scenario", return_value="analysis") as analyze:
            assert client.generate_commentary("roi", {"net_monthly_gain": 1.0}) == "analysis"
        analyze.assert_called_once_with(ScenarioKind.ROI, {"net_monthly_gain": 1.0})

    def test_unknown_scenario(self):
        client = NarrativeClient(model="gpt-4o-mini", client=Mock())
        with pytest.raises(ValueError):
            client.generate_commentary("forecast", {})
