# Kosovo-specific heuristics and fixed lookup tables.
# All values are domain-judgement constants, not fitted to data.

from types import MappingProxyType

# --- Residential audit ---------------------------------------------------

HEATING_BASE_KWH = MappingProxyType({
    "apartment": 300,
    "house": 450,
    "office": 350,
})
DEFAULT_DWELLING = "apartment"

SETPOINT_REFERENCE_C = 21
HEATING_UPLIFT_PER_DEGREE = 0.06

INSULATION_HEATING_FACTOR = MappingProxyType({
    "poor": 1.3,
    "average": 1.0,
    "good": 0.8,
})

DHW_FIXED_KWH = MappingProxyType({
    "instant": 80,
    "solar": 40,
})
DEFAULT_TANK_LITERS = 100
DHW_KWH_PER_TANK_LITER = 0.6

APPLIANCES_BASELINE_KWH = 150

SCORE_PENALTY_PER_DEGREE = 5
SCORE_PENALTY_NO_CURTAINS = 5
SCORE_PENALTY_POOR_INSULATION = 15
SCORE_PENALTY_HIGH_CONSUMPTION = 10
HIGH_CONSUMPTION_KWH = 500
SCORE_MIN, SCORE_MAX = 40, 100

SCORE_BANDS = (
    (80, "excellent", "Excellent! Your energy efficiency is above average."),
    (60, "good", "Good progress, but there's room for improvement."),
    (0, "high_potential", "Significant savings potential identified!"),
)

# --- Site visit readiness ------------------------------------------------

ORIENTATION_SCORE = MappingProxyType({
    "south": 1.0,
    "southeast": 0.9,
    "southwest": 0.9,
    "east": 0.8,
    "west": 0.8,
    "northeast": 0.6,
    "northwest": 0.6,
    "north": 0.4,
})

SHADING_SCORE = MappingProxyType({
    "none": 1.0,
    "light": 0.9,
    "moderate": 0.75,
    "heavy": 0.5,
})

QUALITY_SCORE = MappingProxyType({
    "good": 1.0,
    "average": 0.85,
    "poor": 0.7,
})

IDEAL_ROOF_ANGLE_DEG = 30
ANGLE_SCORE_FLOOR = 0.6

READINESS_WEIGHTS = MappingProxyType({
    "orientation": 0.35,
    "shading": 0.35,
    "angle": 0.15,
    "structure": 0.15,
})

# --- Solar sizing & economics --------------------------------------------

USABLE_ROOF_AREA_M2 = MappingProxyType({
    "house": 60,
    "office": 100,
    "apartment": 30,
})
PANEL_DENSITY_KW_PER_M2 = 0.17  # ~170 Wp/m2 including spacing
ROOF_TILT_FACTOR = MappingProxyType({
    "sloped": 1.0,
    "flat": 0.9,  # racking and row spacing
})
PROFILE_SIZE_MIN_KW, PROFILE_SIZE_MAX_KW = 2.0, 8.0

REFERENCE_CITIES = ("pristina", "prishtina", "prizren", "gjakova")
OTHER_CITY_FACTOR = 0.95

DEFAULT_MONTHLY_KWH = 350
DAYS_PER_MONTH = 30
PEAK_SUN_HOURS = 4
PERFORMANCE_FACTOR = 1.2  # inverter + temperature losses
CONSUMPTION_SIZE_MIN_KW = 1.5

# Same values as SHADING_SCORE, used as a production derate.
SHADING_PRODUCTION_FACTOR = SHADING_SCORE
UNSPECIFIED_SHADING_FACTOR = 0.85

KWH_PER_KW_YEAR = 1200
COST_PER_KW_LOW_EUR = 900
COST_PER_KW_HIGH_EUR = 1200
ELECTRICITY_PRICE_EUR_PER_KWH = 0.12
MIN_PAYBACK_YEARS = 2.5
CO2_TONS_PER_KWH = 0.0006  # 0.6 kg/kWh grid displacement

PROJECTION_YEARS = 25
PROJECTION_KWH_PER_KW_DAY = 3.1
PROJECTION_COST_PER_KW_EUR = 1000
PROJECTION_GRID_PRICE_EUR = 0.10

BATTERY_SHARE_OF_DAILY_PV = 0.5
BATTERY_MIN_KWH, BATTERY_MAX_KWH = 2.0, 10.0
BATTERY_COST_PER_KWH_LOW_EUR = 300
BATTERY_COST_PER_KWH_HIGH_EUR = 500

FIELD_REPORT_SUGGESTIONS = (
    {"title": "Optimize shading", "detail": "Trim nearby trees to increase annual yield.", "when": "Before install"},
    {"title": "Seal windows/insulation", "detail": "Improve envelope to reduce overall demand.", "when": "Anytime"},
    {"title": "Smart usage shift", "detail": "Run appliances during sunny hours for best self-consumption.", "when": "After install"},
)


def city_factor(city) -> float:
    """Coarse regional yield factor: reference cities 1.0, elsewhere 0.95."""
    if not city:
        return 1.0
    c = city.lower()
    if any(ref in c for ref in REFERENCE_CITIES):
        return 1.0
    return OTHER_CITY_FACTOR


def roof_area_for(dwelling_type) -> float:
    return USABLE_ROOF_AREA_M2.get(dwelling_type, USABLE_ROOF_AREA_M2["apartment"])


def tilt_factor_for(roof_type) -> float:
    return ROOF_TILT_FACTOR.get(roof_type, ROOF_TILT_FACTOR["flat"])


def shading_factor_for(shading) -> float:
    return SHADING_PRODUCTION_FACTOR.get(shading, UNSPECIFIED_SHADING_FACTOR)
