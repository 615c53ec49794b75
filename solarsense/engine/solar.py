"""Rooftop PV sizing, economics and battery sizing.

Two sizing strategies are kept side by side:

* ``size_from_profile`` - self-service path, sized from the usable roof area
  of the dwelling type and clamped to a residential 2-8 kW range.
* ``size_from_consumption`` - field path, sized to cover the technician's
  measured monthly consumption with peak-sun-hours and a loss factor.

They answer the same question with different assumptions and are not
reconciled; callers pick the one matching their input record.
"""

from loguru import logger

from ..schemas import (
    AuditProfile, SiteVisitChecklist, SolarSizing, Economics,
    LongTermProjection, BatteryRecommendation,
)
from ..rules.kosovo_rules import (
    PANEL_DENSITY_KW_PER_M2, PROFILE_SIZE_MIN_KW, PROFILE_SIZE_MAX_KW,
    DEFAULT_MONTHLY_KWH, DAYS_PER_MONTH, PEAK_SUN_HOURS, PERFORMANCE_FACTOR,
    CONSUMPTION_SIZE_MIN_KW, KWH_PER_KW_YEAR, COST_PER_KW_LOW_EUR, COST_PER_KW_HIGH_EUR,
    ELECTRICITY_PRICE_EUR_PER_KWH, PROJECTION_YEARS, PROJECTION_KWH_PER_KW_DAY,
    PROJECTION_COST_PER_KW_EUR, PROJECTION_GRID_PRICE_EUR, BATTERY_SHARE_OF_DAILY_PV,
    BATTERY_MIN_KWH, BATTERY_MAX_KWH, BATTERY_COST_PER_KWH_LOW_EUR,
    BATTERY_COST_PER_KWH_HIGH_EUR,
    city_factor, roof_area_for, tilt_factor_for, shading_factor_for,
)
from .calculations import round_half_up, clamp, co2_tons_from_kwh, payback_years


def size_from_profile(profile: AuditProfile) -> SolarSizing:
    raw_kw = roof_area_for(profile.dwelling_type) * PANEL_DENSITY_KW_PER_M2 * tilt_factor_for(profile.roof_type)
    size_kw = round_half_up(clamp(raw_kw, PROFILE_SIZE_MIN_KW, PROFILE_SIZE_MAX_KW), 1)
    production = round_half_up(size_kw * KWH_PER_KW_YEAR * city_factor(profile.city))
    logger.debug("Profile sizing: raw={:.2f} kW -> {} kW, {} kWh/yr", raw_kw, size_kw, production)
    return SolarSizing(system_size_kw=size_kw, annual_production_kwh=production, strategy="profile")


def size_from_consumption(checklist: SiteVisitChecklist) -> SolarSizing:
    monthly_kwh = checklist.avg_monthly_kwh or DEFAULT_MONTHLY_KWH
    daily_kwh = monthly_kwh / DAYS_PER_MONTH
    size_kw = max(CONSUMPTION_SIZE_MIN_KW, round_half_up(daily_kwh / PEAK_SUN_HOURS * PERFORMANCE_FACTOR, 1))
    production = size_kw * KWH_PER_KW_YEAR * shading_factor_for(checklist.shading)
    logger.debug("Consumption sizing: {} kWh/month -> {} kW, {:.0f} kWh/yr", monthly_kwh, size_kw, production)
    return SolarSizing(system_size_kw=size_kw, annual_production_kwh=production, strategy="consumption")


def economics(sizing: SolarSizing) -> Economics:
    cost_low = round_half_up(sizing.system_size_kw * COST_PER_KW_LOW_EUR)
    cost_high = round_half_up(sizing.system_size_kw * COST_PER_KW_HIGH_EUR)
    annual_savings = round_half_up(sizing.annual_production_kwh * ELECTRICITY_PRICE_EUR_PER_KWH)
    return Economics(
        cost_low_eur=cost_low,
        cost_high_eur=cost_high,
        annual_savings_eur=annual_savings,
        payback_years=payback_years((cost_low + cost_high) / 2, annual_savings),
        co2_tons_per_year=co2_tons_from_kwh(sizing.annual_production_kwh),
    )


def long_term_projection(sizing: SolarSizing) -> LongTermProjection:
    """25-year savings under flat tariff and yield assumptions (no degradation, no discounting)."""
    kwp = sizing.system_size_kw
    annual_kwh = round_half_up(kwp * PROJECTION_KWH_PER_KW_DAY * 365)
    savings = round_half_up(annual_kwh * PROJECTION_YEARS * PROJECTION_GRID_PRICE_EUR)
    install_cost = round_half_up(kwp * PROJECTION_COST_PER_KW_EUR)
    return LongTermProjection(
        annual_kwh_assumption=annual_kwh,
        install_cost_estimate_eur=install_cost,
        savings_25y_eur=savings,
        savings_25y_percent_vs_cost=round_half_up(savings / max(install_cost, 1) * 100),
    )


def battery_recommendation(sizing: SolarSizing) -> BatteryRecommendation:
    daily_kwh = max(1, round_half_up(sizing.annual_production_kwh / 365))
    # Nearest 0.5 kWh
    capacity = round_half_up(daily_kwh * BATTERY_SHARE_OF_DAILY_PV * 2) / 2
    capacity = clamp(capacity, BATTERY_MIN_KWH, BATTERY_MAX_KWH)
    return BatteryRecommendation(
        recommended_kwh=capacity,
        cost_low_eur=round_half_up(capacity * BATTERY_COST_PER_KWH_LOW_EUR),
        cost_high_eur=round_half_up(capacity * BATTERY_COST_PER_KWH_HIGH_EUR),
        coverage_percent=min(100, round_half_up(capacity / daily_kwh * 100)),
        daily_production_kwh=daily_kwh,
    )
