"""
Model catalog and rate lookups.

Static per-unit rates for the translation, inference and embedding model
families. Rates are estimates supplied with the tool, not live billing data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class CostUnit(Enum):
    """Unit a catalog prices its models in."""
    CHARACTERS = "characters"
    TOKENS = "tokens"


class ModelFamily(Enum):
    """Model families the engines consume."""
    TRANSLATION = "translation"
    INFERENCE = "inference"
    EMBEDDING = "embedding"


@dataclass(frozen=True)
class ModelRate:
    """Per-unit pricing for a specific model."""
    id: str
    display_name: str
    provider: str
    cost_per_million_chars: Optional[float] = None  # Translation APIs
    cost_per_million_input_tokens: Optional[float] = None
    cost_per_million_output_tokens: Optional[float] = None
    cost_per_million_tokens: Optional[float] = None  # Embeddings
    embedding_dimension: Optional[int] = None

    @property
    def input_rate(self) -> float:
        """Input token rate, 0 when the model has none."""
        return self.cost_per_million_input_tokens or 0.0

    @property
    def output_rate(self) -> float:
        """Output token rate, 0 when the model has none."""
        return self.cost_per_million_output_tokens or 0.0


# Rate fields every model of a family must carry
_REQUIRED_FIELDS = {
    ModelFamily.TRANSLATION: ("cost_per_million_chars",),
    ModelFamily.INFERENCE: ("cost_per_million_input_tokens", "cost_per_million_output_tokens"),
    ModelFamily.EMBEDDING: ("cost_per_million_tokens", "embedding_dimension"),
}

_FAMILY_UNITS = {
    ModelFamily.TRANSLATION: CostUnit.CHARACTERS,
    ModelFamily.INFERENCE: CostUnit.TOKENS,
    ModelFamily.EMBEDDING: CostUnit.TOKENS,
}


@dataclass(frozen=True)
class ModelCatalog:
    """Fixed rate table for one model family."""
    family: ModelFamily
    models: Dict[str, ModelRate]

    def __post_init__(self):
        """Validate every model carries the rate fields of the family's unit."""
        for model_id, model in self.models.items():
            if model_id != model.id:
                raise ValueError(f"Catalog key {model_id!r} does not match model id {model.id!r}")
            for field_name in _REQUIRED_FIELDS[self.family]:
                value = getattr(model, field_name)
                if value is None or value < 0:
                    raise ValueError(
                        f"{self.family.value} model {model_id!r} requires a non-negative {field_name}"
                    )

    @property
    def unit(self) -> CostUnit:
        return _FAMILY_UNITS[self.family]

    def get(self, model_id: str) -> ModelRate:
        """Get pricing for a specific model.

        Args:
            model_id: Model identifier

        Returns:
            ModelRate for the model

        Raises:
            ValueError: If model is not in this catalog
        """
        if model_id not in self.models:
            raise ValueError(f"Unsupported {self.family.value} model: {model_id}")
        return self.models[model_id]

    def ids(self) -> List[str]:
        return list(self.models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self.models


def _catalog(family: ModelFamily, *models: ModelRate) -> ModelCatalog:
    return ModelCatalog(family=family, models={model.id: model for model in models})


# Fixed rate tables - no dynamic fetching
TRANSLATION_MODELS = _catalog(
    ModelFamily.TRANSLATION,
    ModelRate("gemini-3-pro", "Gemini 3 Pro", "Google", cost_per_million_chars=15.0),
    ModelRate("gpt-4o", "GPT-4o", "OpenAI", cost_per_million_chars=12.0),
    ModelRate("claude-3-sonnet", "Claude 3.5 Sonnet", "Anthropic", cost_per_million_chars=10.0),
    ModelRate("google-translate", "Google Translation API", "Google Cloud", cost_per_million_chars=20.0),
    ModelRate("deepl", "DeepL Pro", "DeepL", cost_per_million_chars=25.0),
)

INFERENCE_MODELS = _catalog(
    ModelFamily.INFERENCE,
    ModelRate(
        "gemini-3-flash-preview", "Gemini 3 Flash", "Google",
        cost_per_million_input_tokens=0.10, cost_per_million_output_tokens=0.40,
    ),
    ModelRate(
        "gemini-3-pro-preview", "Gemini 3 Pro", "Google",
        cost_per_million_input_tokens=1.25, cost_per_million_output_tokens=3.75,
    ),
    ModelRate(
        "gpt-4o-mini", "GPT-4o Mini", "OpenAI",
        cost_per_million_input_tokens=0.15, cost_per_million_output_tokens=0.60,
    ),
    ModelRate(
        "claude-3-haiku", "Claude 3 Haiku", "Anthropic",
        cost_per_million_input_tokens=0.25, cost_per_million_output_tokens=1.25,
    ),
)

EMBEDDING_MODELS = _catalog(
    ModelFamily.EMBEDDING,
    ModelRate(
        "text-embedding-004", "text-embedding-004", "Google",
        cost_per_million_tokens=0.10, embedding_dimension=768,
    ),
    ModelRate(
        "text-embedding-3-small", "text-embedding-3-small", "OpenAI",
        cost_per_million_tokens=0.02, embedding_dimension=1536,
    ),
    ModelRate(
        "text-embedding-3-large", "text-embedding-3-large", "OpenAI",
        cost_per_million_tokens=0.13, embedding_dimension=3072,
    ),
)

CATALOGS = {
    ModelFamily.TRANSLATION: TRANSLATION_MODELS,
    ModelFamily.INFERENCE: INFERENCE_MODELS,
    ModelFamily.EMBEDDING: EMBEDDING_MODELS,
}
