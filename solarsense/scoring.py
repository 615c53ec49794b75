from .schemas import AuditProfile, SiteVisitChecklist
from .engine.calculations import round_half_up, clamp, setpoint_of
from .rules.kosovo_rules import (
    SETPOINT_REFERENCE_C, SCORE_PENALTY_PER_DEGREE, SCORE_PENALTY_NO_CURTAINS,
    SCORE_PENALTY_POOR_INSULATION, SCORE_PENALTY_HIGH_CONSUMPTION, HIGH_CONSUMPTION_KWH,
    SCORE_MIN, SCORE_MAX, SCORE_BANDS, ORIENTATION_SCORE, SHADING_SCORE, QUALITY_SCORE,
    IDEAL_ROOF_ANGLE_DEG, ANGLE_SCORE_FLOOR, READINESS_WEIGHTS, UNSPECIFIED_SHADING_FACTOR,
)

def efficiency_score(profile: AuditProfile, total_kwh: float) -> int:
    score = 100
    setpoint = setpoint_of(profile)
    if setpoint > SETPOINT_REFERENCE_C:
        score -= (setpoint - SETPOINT_REFERENCE_C) * SCORE_PENALTY_PER_DEGREE
    if profile.curtains == "none":
        score -= SCORE_PENALTY_NO_CURTAINS
    if profile.insulation_level == "poor":
        score -= SCORE_PENALTY_POOR_INSULATION
    if total_kwh > HIGH_CONSUMPTION_KWH:
        score -= SCORE_PENALTY_HIGH_CONSUMPTION
    return int(clamp(round_half_up(score), SCORE_MIN, SCORE_MAX))

def score_band(score: int) -> tuple[str, str]:
    """Return (band, message) for an efficiency score."""
    for threshold, band, message in SCORE_BANDS:
        if score >= threshold:
            return band, message
    return SCORE_BANDS[-1][1], SCORE_BANDS[-1][2]

def difficulty_band(difficulty: int) -> str:
    if difficulty <= 2:
        return "easy"
    if difficulty <= 3:
        return "moderate"
    return "hard"

def angle_score(roof_angle) -> float:
    deviation = abs(IDEAL_ROOF_ANGLE_DEG - (roof_angle or 0))
    return max(ANGLE_SCORE_FLOOR, 1 - deviation / 90)

def structure_score(insulation_quality: str, windows_quality: str) -> float:
    return (QUALITY_SCORE[insulation_quality] + QUALITY_SCORE[windows_quality]) / 2

def readiness_components(checklist: SiteVisitChecklist) -> dict:
    return {
        "orientation": ORIENTATION_SCORE[checklist.orientation],
        "shading": SHADING_SCORE.get(checklist.shading, UNSPECIFIED_SHADING_FACTOR),
        "angle": angle_score(checklist.roof_angle),
        "structure": structure_score(checklist.insulation_quality, checklist.windows_quality),
    }

def readiness_score(checklist: SiteVisitChecklist, weights=None) -> int:
    if weights is None:
        weights = READINESS_WEIGHTS
    components = readiness_components(checklist)
    raw_score = sum(weights[name] * value for name, value in components.items())
    return round_half_up(raw_score * 100)
