"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for scenario configs.
"""

import os
import tempfile

import pytest
import yaml

from ai_economics_navigator.config.loader import NarrativeConfig, ScenarioConfig, load_scenario_config
from ai_economics_navigator.core.rag import RagParameters
from ai_economics_navigator.core.translation import QualityTier, TranslationParameters


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "scenario.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        """Test that a valid configuration loads correctly."""
        config_data = {
            "translation": {
                "model_id": "deepl",
                "document_count": 1000,
                "characters_per_document": 2500,
                "language_multiplier": 10,
                "quality_tier": "full",
            },
            "rag": {
                "queries_per_month": 20000,
                "reranker_enabled": True,
                "inference_model_id": "gpt-4o-mini",
            },
            "roi": {
                "user_count": 200,
            },
            "narrative": {
                "model": "gpt-4o",
                "debounce_seconds": 0.5,
                "retries": 3,
            },
        }

        config = load_scenario_config(self._write_config(config_data))

        # Verify translation
        assert config.translation.model_id == "deepl"
        assert config.translation.document_count == 1000
        assert config.translation.language_multiplier == 10
        assert config.translation.quality_tier == QualityTier.FULL

        # Verify RAG
        assert config.rag.queries_per_month == 20000
        assert config.rag.reranker_enabled is True
        assert config.rag.inference_model_id == "gpt-4o-mini"

        # Verify ROI and narrative
        assert config.roi.user_count == 200
        assert config.narrative.model == "gpt-4o"
        assert config.narrative.debounce_seconds == 0.5
        assert config.narrative.retries == 3

    def test_missing_sections_use_defaults(self):
        """Test that omitted sections fall back to defaults."""
        config = load_scenario_config(self._write_config({"roi": {"user_count": 10}}))

        assert config.translation == TranslationParameters()
        assert config.rag == RagParameters()
        assert config.narrative == NarrativeConfig()
        assert config.roi.user_count == 10

    def test_unspecified_fields_keep_defaults(self):
        """Test that partial sections keep per-field defaults."""
        config = load_scenario_config(self._write_config({"rag": {"document_count": 50}}))

        assert config.rag.document_count == 50
        assert config.rag.chunk_size_tokens == RagParameters().chunk_size_tokens

    def test_numeric_strings_are_normalized(self):
        """Test currency and thousands separators in numeric fields."""
        config = load_scenario_config(self._write_config({
            "roi": {"employee_hourly_rate": "$45.50", "user_count": "1,200"},
        }))

        assert config.roi.employee_hourly_rate == 45.5
        assert config.roi.user_count == 1200

    def test_unparseable_number_falls_back_to_default(self):
        """Test that garbage numbers use the field default."""
        config = load_scenario_config(self._write_config({"translation": {"document_count": "many"}}))
        assert config.translation.document_count == TranslationParameters().document_count

    def test_missing_file(self):
        """Test that missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Scenario config file not found"):
            load_scenario_config(os.path.join(self.temp_dir, "missing.yaml"))

    def test_invalid_yaml(self):
        """Test that invalid YAML raises YAMLError."""
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("translation: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_scenario_config(config_path)

    def test_empty_config(self):
        """Test that empty config raises ValueError."""
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("")

        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_scenario_config(config_path)

    def test_non_dict_config(self):
        """Test that a list at the top level is rejected."""
        with pytest.raises(ValueError, match="Configuration must be a dictionary"):
            load_scenario_config(self._write_config(["translation"]))

    def test_unknown_top_level_keys(self):
        """Test that unknown top-level keys raise ValueError."""
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_scenario_config(self._write_config({"budget": {"daily": 100}}))

    def test_unknown_section_keys(self):
        """Test that a misspelled field raises ValueError."""
        with pytest.raises(ValueError, match="Unknown keys in rag"):
            load_scenario_config(self._write_config({"rag": {"querys_per_month": 10}}))

    def test_section_must_be_dict(self):
        """Test that a scalar section is rejected."""
        with pytest.raises(ValueError, match="'roi' must be a dictionary"):
            load_scenario_config(self._write_config({"roi": 5}))

    def test_unknown_model(self):
        """Test that a model outside the catalog is rejected."""
        with pytest.raises(ValueError, match="'embedding_model_id' in rag must be one of"):
            load_scenario_config(self._write_config({"rag": {"embedding_model_id": "word2vec"}}))

    def test_non_string_model(self):
        """Test that a non-string model id is rejected."""
        with pytest.raises(ValueError, match="'model_id' in translation must be one of"):
            load_scenario_config(self._write_config({"translation": {"model_id": ["deepl"]}}))

    def test_invalid_quality_tier(self):
        """Test that an unknown quality tier is rejected."""
        with pytest.raises(ValueError, match="'quality_tier' in translation must be one of"):
            load_scenario_config(self._write_config({"translation": {"quality_tier": "premium"}}))

    def test_reranker_must_be_bool(self):
        """Test that reranker_enabled must be a boolean."""
        with pytest.raises(ValueError, match="must be true or false"):
            load_scenario_config(self._write_config({"rag": {"reranker_enabled": "yes"}}))


class TestNarrativeConfig:
    """Test narrative settings validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data) -> str:
        config_path = os.path.join(self.temp_dir, "scenario.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_defaults(self):
        config = NarrativeConfig()
        assert config.model == "gpt-4o-mini"
        assert config.debounce_seconds == 1.5
        assert config.retries == 2
        assert config.retry_delay_seconds == 1.0

    def test_empty_model(self):
        with pytest.raises(ValueError, match="narrative model cannot be empty"):
            load_scenario_config(self._write_config({"narrative": {"model": " "}}))

    def test_negative_debounce(self):
        with pytest.raises(ValueError, match="debounce_seconds must be >= 0"):
            load_scenario_config(self._write_config({"narrative": {"debounce_seconds": -1}}))

    def test_retries_must_be_integer(self):
        with pytest.raises(ValueError, match="'retries' in narrative must be an integer"):
            load_scenario_config(self._write_config({"narrative": {"retries": "two"}}))

    def test_retry_delay_must_be_number(self):
        with pytest.raises(ValueError, match="'retry_delay_seconds' in narrative must be a number"):
            load_scenario_config(self._write_config({"narrative": {"retry_delay_seconds": "fast"}}))

    def test_null_seconds_keep_defaults(self):
        config = load_scenario_config(self._write_config({
            "narrative": {"debounce_seconds": None, "retry_delay_seconds": None},
        }))
        assert config.narrative.debounce_seconds == 1.5
        assert config.narrative.retry_delay_seconds == 1.0

    def test_null_retries_rejected(self):
        with pytest.raises(ValueError, match="'retries' in narrative must be an integer"):
            load_scenario_config(self._write_config({"narrative": {"retries": None}}))

    def test_zero_retry_delay(self):
        with pytest.raises(ValueError, match="retry_delay_seconds must be > 0"):
            load_scenario_config(self._write_config({"narrative": {"retry_delay_seconds": 0}}))

    def test_unknown_narrative_key(self):
        with pytest.raises(ValueError, match="Unknown keys in narrative"):
            load_scenario_config(self._write_config({"narrative": {"temperature": 0.2}}))

    def test_scenario_config_defaults(self):
        config = ScenarioConfig()
        assert config.narrative.model == "gpt-4o-mini"
        assert config.rag.embedding_model_id == "text-embedding-004"
