import math
from loguru import logger

from ..schemas import AuditProfile, EndUseBreakdown
from ..rules.kosovo_rules import (
    HEATING_BASE_KWH, DEFAULT_DWELLING, SETPOINT_REFERENCE_C, HEATING_UPLIFT_PER_DEGREE,
    INSULATION_HEATING_FACTOR, DHW_FIXED_KWH, DEFAULT_TANK_LITERS, DHW_KWH_PER_TANK_LITER,
    APPLIANCES_BASELINE_KWH, CO2_TONS_PER_KWH, MIN_PAYBACK_YEARS,
)

def round_half_up(value: float, ndigits: int = 0):
    # Halves round towards +inf, so stored reports reproduce exactly.
    scale = 10 ** ndigits
    rounded = math.floor(value * scale + 0.5)
    if ndigits == 0:
        return int(rounded)
    return rounded / scale

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))

def setpoint_of(profile: AuditProfile) -> float:
    if profile.thermostat_setpoint is None:
        return SETPOINT_REFERENCE_C
    return profile.thermostat_setpoint

def heating_kwh(profile: AuditProfile) -> int:
    base = HEATING_BASE_KWH.get(profile.dwelling_type, HEATING_BASE_KWH[DEFAULT_DWELLING])
    setpoint = setpoint_of(profile)
    if setpoint > SETPOINT_REFERENCE_C:
        base *= 1 + HEATING_UPLIFT_PER_DEGREE * (setpoint - SETPOINT_REFERENCE_C)
    # Unknown insulation levels behave like "average"
    base *= INSULATION_HEATING_FACTOR.get(profile.insulation_level, 1.0)
    return round_half_up(base)

def dhw_kwh(profile: AuditProfile) -> int:
    if profile.water_heater in DHW_FIXED_KWH:
        return DHW_FIXED_KWH[profile.water_heater]
    tank = profile.water_tank_liters or DEFAULT_TANK_LITERS
    return round_half_up(tank * DHW_KWH_PER_TANK_LITER)

def estimate_end_use(profile: AuditProfile) -> EndUseBreakdown:
    """Monthly kWh split across heating, domestic hot water and appliances."""
    breakdown = EndUseBreakdown(
        heating_kwh=heating_kwh(profile),
        dhw_kwh=dhw_kwh(profile),
        appliances_kwh=APPLIANCES_BASELINE_KWH,
    )
    logger.debug(
        "End-use estimate for {}: heating={} dhw={} appliances={} total={}",
        profile.dwelling_type, breakdown.heating_kwh, breakdown.dhw_kwh,
        breakdown.appliances_kwh, breakdown.total_kwh,
    )
    return breakdown

def co2_tons_from_kwh(kwh: float) -> float:
    # kWh/year to tonnes/year, one decimal
    return round_half_up(kwh * CO2_TONS_PER_KWH, 1)

def payback_years(capex_eur: float, annual_savings_eur: float) -> float:
    years = capex_eur / max(annual_savings_eur, 1)
    return max(MIN_PAYBACK_YEARS, round_half_up(years, 1))
