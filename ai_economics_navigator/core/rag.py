"""
RAG lifecycle cost engine.

Models a retrieval-augmented-generation system across three phases:

1. Build & Ingest - one-time parsing and embedding of the corpus
2. Run - monthly query embedding, vector storage, reranking and inference
3. Govern - monthly monitoring, evaluation, human review and re-indexing
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .catalog import EMBEDDING_MODELS, INFERENCE_MODELS
from .normalize import clamp_percent, non_negative, positive_or_default, safe_divide
from .projection import CostBreakdown, ProjectionPoint, project_setup_then_recurring

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE_TOKENS = 500
BYTES_PER_FLOAT32 = 4
BYTES_PER_GB = 1024 ** 3
TOKENS_PER_MILLION = 1_000_000


@dataclass(frozen=True)
class RagParameters:
    """Inputs for the RAG scenario, grouped by lifecycle phase."""
    # Build & Ingest
    document_count: Any = 1000
    tokens_per_document: Any = 800
    parsing_cost_per_document: Any = 0.05
    chunk_size_tokens: Any = 400
    overlap_percent: Any = 15
    metadata_overhead_percent: Any = 10
    embedding_model_id: str = "text-embedding-004"

    # Run
    queries_per_month: Any = 5000
    avg_query_tokens: Any = 150
    retrieved_chunks_per_query: Any = 3
    avg_answer_tokens: Any = 250
    cache_hit_rate_percent: Any = 20
    managed_db_cost_per_thousand_vectors: Any = 0.10
    reranker_enabled: bool = False
    reranker_cost_per_thousand: Any = 1.0
    inference_model_id: str = "gemini-3-flash-preview"

    # Govern
    monitoring_cost_per_thousand: Any = 0.50
    eval_runs_per_month: Any = 2
    eval_tokens_per_run: Any = 50000
    human_review_hours_per_month: Any = 5
    human_hourly_rate: Any = 80
    reindex_frequency_per_year: Any = 4


@dataclass(frozen=True)
class BuildPhase:
    """One-time ingestion result."""
    base_tokens: float
    effective_tokens: float
    chunk_size_tokens: float
    total_chunks: int
    storage_size_bytes: float
    costs: CostBreakdown

    @property
    def storage_size_gb(self) -> float:
        return self.storage_size_bytes / BYTES_PER_GB

    @property
    def total(self) -> float:
        return self.costs.total


@dataclass(frozen=True)
class RunPhase:
    """Monthly operational result."""
    queries_per_month: float
    effective_queries: float
    tokens_in_per_query: float
    costs: CostBreakdown

    @property
    def total(self) -> float:
        return self.costs.total

    @property
    def inference_cost(self) -> float:
        return self.costs["inference_input"] + self.costs["inference_output"]

    @property
    def unit_cost_per_interaction(self) -> float:
        """Monthly ops cost per query; 0 when there are no queries."""
        return safe_divide(self.total, self.queries_per_month)


@dataclass(frozen=True)
class GovernPhase:
    """Monthly quality and labor result."""
    costs: CostBreakdown

    @property
    def total(self) -> float:
        return self.costs.total


@dataclass(frozen=True)
class RagResult:
    """Complete RAG lifecycle cost result."""
    build: BuildPhase
    run: RunPhase
    govern: GovernPhase
    annualized_total: float
    projection: List[ProjectionPoint] = field(default_factory=list)

    @property
    def one_time_setup_total(self) -> float:
        return self.build.total

    @property
    def monthly_ops_total(self) -> float:
        return self.run.total

    @property
    def monthly_governance_total(self) -> float:
        return self.govern.total

    @property
    def unit_cost_per_interaction(self) -> float:
        return self.run.unit_cost_per_interaction

    def summary(self) -> Dict[str, float]:
        """Headline phase totals."""
        return {
            "setup": self.one_time_setup_total,
            "monthly_ops": self.monthly_ops_total,
            "monthly_governance": self.monthly_governance_total,
        }

    def breakout(self) -> Dict[str, float]:
        """Per-driver costs across phases."""
        return {
            "parsing": self.build.costs["parsing"],
            "embedding": self.build.costs["embedding"],
            "inference": self.run.inference_cost,
            "vector_db": self.run.costs["vector_db"],
            "reranking": self.run.costs["reranking"],
            "governance": self.monthly_governance_total,
        }

    def to_snapshot(self) -> Dict[str, Any]:
        """JSON-serializable view for the narrative collaborator."""
        return {
            "total_chunks": self.build.total_chunks,
            "storage_size_gb": self.build.storage_size_gb,
            "build_costs": self.build.costs.to_dict(),
            "run_costs": self.run.costs.to_dict(),
            "govern_costs": self.govern.costs.to_dict(),
            **self.summary(),
            "unit_cost_per_interaction": self.unit_cost_per_interaction,
            "annualized_total": self.annualized_total,
        }


def compute_build_phase(params: RagParameters) -> BuildPhase:
    """Compute one-time parsing and embedding cost plus vector storage size."""
    embedding_model = EMBEDDING_MODELS.get(params.embedding_model_id)

    documents = non_negative(params.document_count)
    chunk_size = positive_or_default(params.chunk_size_tokens, DEFAULT_CHUNK_SIZE_TOKENS)

    base_tokens = documents * non_negative(params.tokens_per_document)
    effective_tokens = base_tokens * (1 + non_negative(params.overlap_percent) / 100)
    total_chunks = math.ceil(effective_tokens / chunk_size)

    parsing = documents * non_negative(params.parsing_cost_per_document)
    embedding = (effective_tokens / TOKENS_PER_MILLION) * embedding_model.cost_per_million_tokens

    # float32 vectors, inflated by metadata overhead
    vector_bytes = total_chunks * embedding_model.embedding_dimension * BYTES_PER_FLOAT32
    storage_bytes = vector_bytes * (1 + non_negative(params.metadata_overhead_percent) / 100)

    return BuildPhase(
        base_tokens=base_tokens,
        effective_tokens=effective_tokens,
        chunk_size_tokens=chunk_size,
        total_chunks=total_chunks,
        storage_size_bytes=storage_bytes,
        costs=CostBreakdown({"parsing": parsing, "embedding": embedding}),
    )


def compute_run_phase(params: RagParameters, build: BuildPhase) -> RunPhase:
    """Compute monthly operating cost.

    Cache hits are assumed to bypass LLM inference entirely, so only
    ``effective_queries`` are charged for input and output tokens.
    """
    embedding_model = EMBEDDING_MODELS.get(params.embedding_model_id)
    inference_model = INFERENCE_MODELS.get(params.inference_model_id)

    queries = non_negative(params.queries_per_month)
    query_tokens = non_negative(params.avg_query_tokens)

    query_embedding = (queries * query_tokens / TOKENS_PER_MILLION) * embedding_model.cost_per_million_tokens
    vector_db = (build.total_chunks / 1000) * non_negative(params.managed_db_cost_per_thousand_vectors)
    reranking = 0.0
    if params.reranker_enabled:
        reranking = (queries / 1000) * non_negative(params.reranker_cost_per_thousand)

    effective_queries = queries * (1 - clamp_percent(params.cache_hit_rate_percent) / 100)
    tokens_in = query_tokens + non_negative(params.retrieved_chunks_per_query) * build.chunk_size_tokens
    tokens_out = non_negative(params.avg_answer_tokens)

    inference_input = (effective_queries * tokens_in / TOKENS_PER_MILLION) * inference_model.input_rate
    inference_output = (effective_queries * tokens_out / TOKENS_PER_MILLION) * inference_model.output_rate

    return RunPhase(
        queries_per_month=queries,
        effective_queries=effective_queries,
        tokens_in_per_query=tokens_in,
        costs=CostBreakdown({
            "query_embedding": query_embedding,
            "vector_db": vector_db,
            "reranking": reranking,
            "inference_input": inference_input,
            "inference_output": inference_output,
        }),
    )


def compute_govern_phase(params: RagParameters, build: BuildPhase) -> GovernPhase:
    """Compute monthly governance cost.

    Evaluation reuses the inference model's input rate. Re-indexing recurs
    as a fraction of the one-time setup cost.
    """
    inference_model = INFERENCE_MODELS.get(params.inference_model_id)

    monitoring = (non_negative(params.queries_per_month) / 1000) * non_negative(params.monitoring_cost_per_thousand)
    evaluation = (
        non_negative(params.eval_runs_per_month) * non_negative(params.eval_tokens_per_run) / TOKENS_PER_MILLION
    ) * inference_model.input_rate
    human_review = non_negative(params.human_review_hours_per_month) * non_negative(params.human_hourly_rate)
    reindexing = build.total * (non_negative(params.reindex_frequency_per_year) / 12)

    return GovernPhase(costs=CostBreakdown({
        "monitoring": monitoring,
        "evaluation": evaluation,
        "human_review": human_review,
        "reindexing": reindexing,
    }))


def compute_rag_costs(params: RagParameters) -> RagResult:
    """Compute all three lifecycle phases and the 12-month projection.

    Args:
        params: RAG scenario inputs (raw values are normalized)

    Returns:
        RagResult with per-phase breakdowns, annualized total and projection

    Raises:
        ValueError: If the embedding or inference model is not in the catalog
    """
    build = compute_build_phase(params)
    run = compute_run_phase(params, build)
    govern = compute_govern_phase(params, build)

    annualized_total = build.total + (run.total * 12) + (govern.total * 12)

    projection = project_setup_then_recurring(
        setup={"setup": build.total, "operations": 0.0, "governance": 0.0},
        monthly={"setup": 0.0, "operations": run.total, "governance": govern.total},
    )

    logger.debug(
        "RAG: setup=%.4f ops=%.4f gov=%.4f annual=%.4f",
        build.total, run.total, govern.total, annualized_total,
    )

    return RagResult(
        build=build,
        run=run,
        govern=govern,
        annualized_total=annualized_total,
        projection=projection,
    )
