"""Entry points for the two estimation pipelines.

The audit pipeline and the site-visit pipeline share constants but no code
path; each call depends only on its own input record.
"""

from typing import Optional
from loguru import logger

from .schemas import AuditProfile, SiteVisitChecklist, AuditResult, SolarReport, SolarAssessment
from .engine.calculations import estimate_end_use
from .engine.solar import (
    size_from_profile, size_from_consumption, economics, long_term_projection, battery_recommendation,
)
from .scoring import efficiency_score, score_band, readiness_score
from .llm_layer import AdviceSource, HuggingFaceAdviceSource, rank_advice
from .rules.kosovo_rules import FIELD_REPORT_SUGGESTIONS


def run_audit(profile: AuditProfile, source: Optional[AdviceSource] = None) -> AuditResult:
    if source is None:
        source = HuggingFaceAdviceSource()
    end_use = estimate_end_use(profile)
    score = efficiency_score(profile, end_use.total_kwh)
    band, _ = score_band(score)
    advice, used_fallback = rank_advice(source, profile, end_use.total_kwh)
    logger.info("Audit scored {} ({}), {} advice items", score, band, len(advice))
    return AuditResult(end_use=end_use, score=score, band=band, advice=advice, used_fallback=used_fallback)


def run_site_visit(checklist: SiteVisitChecklist) -> SolarReport:
    readiness = readiness_score(checklist)
    sizing = size_from_consumption(checklist)
    report = SolarReport(
        checklist=checklist,
        readiness_score=readiness,
        sizing=sizing,
        economics=economics(sizing),
        suggestions=[dict(s) for s in FIELD_REPORT_SUGGESTIONS],
    )
    logger.info("Site visit {}: readiness {}%, {} kW", checklist.lead_id, readiness, sizing.system_size_kw)
    return report


def run_solar_potential(profile: AuditProfile) -> SolarAssessment:
    sizing = size_from_profile(profile)
    return SolarAssessment(
        profile=profile,
        sizing=sizing,
        economics=economics(sizing),
        projection=long_term_projection(sizing),
        battery=battery_recommendation(sizing),
    )
