from __future__ import annotations

import uuid
from dataclasses import dataclass

from loguru import logger

from curator.errors import ScopeError
from curator.models.article import BusinessField
from curator.models.research import AgentResult, ResearchTask
from curator.services import logger as log_service
from curator.tools.search_provider import FIELD_SEED_TERMS, SemanticRefiner
from curator.tools.text_utils import dedupe_casefold


@dataclass(slots=True)
class ResearchLeaderConfig:
    base_prompt: str
    business_fields: list[BusinessField]
    keywords: list[str]
    timeframe: int
    vector_search_enabled: bool = False
    refine_top_k: int = 5


def is_keyword_relevant(keyword: str, business_field: BusinessField) -> bool:
    """True when the keyword and a seed term of the field contain one another."""
    lowered = keyword.lower().strip()
    if not lowered:
        return False
    return any(seed in lowered or lowered in seed for seed in FIELD_SEED_TERMS[business_field])


class ResearchLeaderAgent:
    """Turns the curation settings into one scoped task per business field."""

    name = "research_leader"

    def __init__(self, config: ResearchLeaderConfig, refiner: SemanticRefiner | None = None):
        self.config = config
        self.refiner = refiner

    async def establish_scope(self) -> AgentResult:
        warnings: list[str] = []
        try:
            if not self.config.business_fields:
                raise ScopeError("No company branches configured; research scope is empty")

            tasks: list[ResearchTask] = []
            for business_field in self.config.business_fields:
                keywords = [
                    k for k in self.config.keywords if is_keyword_relevant(k, business_field)
                ]
                if self.config.vector_search_enabled:
                    keywords = await self._refine_keywords(business_field, keywords, warnings)
                tasks.append(
                    ResearchTask(
                        id=f"task-{business_field.name.lower()}-{uuid.uuid4().hex[:8]}",
                        business_field=business_field,
                        keywords=keywords,
                    )
                )

            log_service.log_agent_step(
                self.name,
                "establish_scope",
                "completed",
                {"tasks": len(tasks), "degraded": len(warnings)},
            )
            return AgentResult.ok(tasks, warnings=warnings)
        except Exception as e:
            logger.exception(f"Research scope failed: {e}")
            log_service.log_agent_step(self.name, "establish_scope", "failed", {"error": str(e)})
            return AgentResult.fail(str(e) or "Unknown error in ResearchLeaderAgent", warnings)

    async def _refine_keywords(
        self,
        business_field: BusinessField,
        base_keywords: list[str],
        warnings: list[str],
    ) -> list[str]:
        if self.refiner is None:
            warnings.append(
                f"Vector refinement enabled but no refiner configured for {business_field.value}"
            )
            return base_keywords
        try:
            refined = await self.refiner.refine(business_field, list(base_keywords))
        except Exception as e:
            message = f"Keyword refinement failed for {business_field.value}: {e}"
            logger.warning(message)
            warnings.append(message)
            return base_keywords

        cleaned = dedupe_casefold([k for k in refined if isinstance(k, str)])
        if not cleaned:
            return base_keywords
        return cleaned[: max(self.config.refine_top_k, len(base_keywords))]
