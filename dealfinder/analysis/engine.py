"""Deal analysis engine that ties metrics and scoring to property records."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from dealfinder.config import EnrichmentConfig, FinancingConfig
from dealfinder.models import (
    FinancingAssumptions,
    ListingStatus,
    PropertyAnalysis,
    PropertyRecord,
)
from dealfinder.analysis.metrics import compute_metrics
from dealfinder.analysis.scoring import score_band, score_investment

logger = logging.getLogger(__name__)


class DealAnalyzer:
    """Computes metrics and scores for property records.

    ``financing`` holds the calculator defaults used by :meth:`analyze`;
    ``enrichment`` holds the fixed assumptions stamped onto new candidates by
    :meth:`enrich`.
    """

    def __init__(
        self,
        financing: FinancingConfig | None = None,
        enrichment: EnrichmentConfig | None = None,
    ):
        self.financing = financing or FinancingConfig()
        self.enrichment = enrichment or EnrichmentConfig()

    def analyze(
        self,
        record: PropertyRecord,
        financing: FinancingAssumptions | None = None,
    ) -> PropertyAnalysis:
        """Analyze one record, optionally with caller-adjusted assumptions."""
        assumptions = financing or self.financing.assumptions()
        property_input = record.to_property_input(
            default_insurance=self.financing.default_insurance_annual,
            default_vacancy=self.financing.default_vacancy_rate,
        )
        metrics = compute_metrics(property_input, assumptions)
        score = score_investment(metrics, record.units)
        return PropertyAnalysis(
            record=record,
            financing=assumptions,
            metrics=metrics,
            score=score,
            band=score_band(score),
        )

    def analyze_records(self, records: Iterable[PropertyRecord]) -> list[PropertyAnalysis]:
        return [self.analyze(record) for record in records]

    def enrich(self, record: PropertyRecord) -> PropertyRecord:
        """Return a copy of ``record`` carrying cached metrics and a score."""
        assumptions = self.enrichment.assumptions()
        property_input = record.to_property_input(
            default_insurance=self.enrichment.default_insurance_annual,
            default_vacancy=self.enrichment.default_vacancy_rate,
        )
        metrics = compute_metrics(property_input, assumptions)
        score = score_investment(metrics, record.units)
        maintenance = metrics.effective_gross_income * assumptions.maintenance_percent / 100

        return record.model_copy(
            update={
                "hoa_monthly": record.hoa_monthly or 0.0,
                "maintenance_annual": maintenance,
                "cap_rate": metrics.cap_rate_percent,
                "cash_flow_monthly": metrics.monthly_cash_flow,
                # The listing store's "roi" is the cash-on-cash return
                "roi": metrics.cash_on_cash_return_percent,
                "noi": metrics.noi,
                "investment_score": score,
                "status": ListingStatus.ACTIVE,
            }
        )

    def enrich_raw(self, raw_listings: Iterable[dict[str, Any]]) -> list[PropertyRecord]:
        """Validate and enrich raw candidate dicts, skipping malformed ones."""
        enriched: list[PropertyRecord] = []
        for i, raw in enumerate(raw_listings):
            try:
                record = PropertyRecord.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping candidate %d: %s", i, e.errors()[0]["msg"])
                continue
            enriched.append(self.enrich(record))
        logger.info("Enriched %d candidate(s)", len(enriched))
        return enriched

    def get_top_deals(
        self,
        records: Iterable[PropertyRecord],
        min_score: int = 0,
        limit: int = 20,
    ) -> list[PropertyAnalysis]:
        """Analyze records and return the best scoring ones, highest first."""
        analyses = [a for a in self.analyze_records(records) if a.score >= min_score]
        analyses.sort(key=lambda a: a.score, reverse=True)
        return analyses[:limit]
