"""
Configuration management and loading.

Loads scenario parameter sets and narrative settings from YAML files.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Type, TypeVar

import yaml

from ai_economics_navigator.core.catalog import EMBEDDING_MODELS, INFERENCE_MODELS, TRANSLATION_MODELS
from ai_economics_navigator.core.normalize import normalize_number
from ai_economics_navigator.core.rag import RagParameters
from ai_economics_navigator.core.roi import RoiParameters
from ai_economics_navigator.core.translation import QualityTier, TranslationParameters
from ai_economics_navigator.narrative.client import (
    DEFAULT_MODEL,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY_SECONDS,
)
from ai_economics_navigator.narrative.task import DEFAULT_DEBOUNCE_SECONDS

P = TypeVar("P")

# Fields validated against a catalog rather than normalized as numbers
_MODEL_FIELDS = {
    "model_id": TRANSLATION_MODELS,
    "embedding_model_id": EMBEDDING_MODELS,
    "inference_model_id": INFERENCE_MODELS,
}


@dataclass(frozen=True)
class NarrativeConfig:
    """Settings for narrative commentary."""
    model: str = DEFAULT_MODEL
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    retries: int = DEFAULT_RETRIES
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS

    def __post_init__(self):
        """Validate narrative settings."""
        if not self.model or not self.model.strip():
            raise ValueError("narrative model cannot be empty")
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.retry_delay_seconds <= 0:
            raise ValueError("retry_delay_seconds must be > 0")


@dataclass(frozen=True)
class ScenarioConfig:
    """Complete scenario configuration."""
    translation: TranslationParameters = field(default_factory=TranslationParameters)
    rag: RagParameters = field(default_factory=RagParameters)
    roi: RoiParameters = field(default_factory=RoiParameters)
    narrative: NarrativeConfig = field(default_factory=NarrativeConfig)


def load_scenario_config(path: str) -> ScenarioConfig:
    """Load and validate scenario configuration from YAML file.

    Every section is optional and falls back to the built-in defaults.
    Unknown keys are rejected so that a typo never silently leaves a
    default in place.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated ScenarioConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Scenario config file not found: {path}")

    # Load YAML content
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    # Validate top-level structure
    allowed_top_keys = {'translation', 'rag', 'roi', 'narrative'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    return ScenarioConfig(
        translation=_parse_parameters(TranslationParameters, raw_config.get('translation'), 'translation'),
        rag=_parse_parameters(RagParameters, raw_config.get('rag'), 'rag'),
        roi=_parse_parameters(RoiParameters, raw_config.get('roi'), 'roi'),
        narrative=_parse_narrative(raw_config.get('narrative'), 'narrative'),
    )


def _section(data: Any, path: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{path}' must be a dictionary")
    return data


def _parse_parameters(cls: Type[P], data: Any, path: str) -> P:
    """Parse one scenario section into its parameter dataclass.

    Args:
        cls: Parameter dataclass to build
        data: Raw section data (may be None)
        path: Path for error messages

    Returns:
        Parameter instance with unspecified fields left at their defaults

    Raises:
        ValueError: If the section is invalid
    """
    data = _section(data, path)
    defaults = {f.name: f.default for f in fields(cls)}

    unknown_keys = set(data.keys()) - set(defaults)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    values = {}
    for key, raw in data.items():
        if key in _MODEL_FIELDS:
            if not isinstance(raw, str) or raw not in _MODEL_FIELDS[key]:
                valid_ids = _MODEL_FIELDS[key].ids()
                raise ValueError(f"'{key}' in {path} must be one of: {valid_ids}")
            values[key] = raw
        elif key == 'quality_tier':
            values[key] = _parse_quality_tier(raw, path)
        elif key == 'reranker_enabled':
            if not isinstance(raw, bool):
                raise ValueError(f"'reranker_enabled' in {path} must be true or false")
            values[key] = raw
        elif key == 'base_cost_per_thousand_chars' and raw is None:
            values[key] = None
        else:
            default = defaults[key]
            values[key] = normalize_number(raw, default if default is not None else 0.0)

    return cls(**values)


def _parse_quality_tier(raw: Any, path: str) -> QualityTier:
    if not isinstance(raw, str):
        raise ValueError(f"'quality_tier' in {path} must be a string")
    try:
        return QualityTier(raw.lower())
    except ValueError:
        valid_tiers = [tier.value for tier in QualityTier]
        raise ValueError(f"'quality_tier' in {path} must be one of: {valid_tiers}")


def _parse_narrative(data: Any, path: str) -> NarrativeConfig:
    """Parse and validate narrative settings."""
    data = _section(data, path)

    allowed_keys = {f.name for f in fields(NarrativeConfig)}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    model = data.get('model', DEFAULT_MODEL)
    if not isinstance(model, str):
        raise ValueError(f"'model' in {path} must be a string")

    retries = data.get('retries', DEFAULT_RETRIES)
    if isinstance(retries, bool) or not isinstance(retries, int):
        raise ValueError(f"'retries' in {path} must be an integer")

    seconds = {}
    for key, default in (('debounce_seconds', DEFAULT_DEBOUNCE_SECONDS),
                         ('retry_delay_seconds', DEFAULT_RETRY_DELAY_SECONDS)):
        value = data.get(key)
        # An explicit null keeps the default
        if value is None:
            value = default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"'{key}' in {path} must be a number")
        seconds[key] = float(value)

    return NarrativeConfig(
        model=model,
        debounce_seconds=seconds['debounce_seconds'],
        retries=retries,
        retry_delay_seconds=seconds['retry_delay_seconds'],
    )
