from dataclasses import dataclass, field, asdict
from typing import Literal, Optional

DwellingType = Literal["apartment", "house", "office"]
RoofType = Literal["flat", "sloped"]
HeatingType = Literal["electric", "wood", "pellet", "gas", "district"]
WaterHeater = Literal["electric_tank", "instant", "solar"]
Curtains = Literal["none", "light", "heavy"]
Quality = Literal["poor", "average", "good"]
Shading = Literal["none", "light", "moderate", "heavy"]
Orientation = Literal[
    "north", "northeast", "east", "southeast",
    "south", "southwest", "west", "northwest",
]

@dataclass(frozen=True)
class AuditProfile:
    dwelling_type: DwellingType = "apartment"
    roof_type: RoofType = "flat"
    heating_type: HeatingType = "electric"
    thermostat_setpoint: float = 21.0  # degrees C
    water_heater: WaterHeater = "electric_tank"
    water_tank_liters: Optional[float] = None
    curtains: Curtains = "light"
    insulation_level: Quality = "average"
    occupancy: dict = field(default_factory=dict, hash=False)
    city: Optional[str] = None
    address: Optional[str] = None

@dataclass(frozen=True)
class EndUseBreakdown:
    heating_kwh: int  # kWh/month
    dhw_kwh: int
    appliances_kwh: int

    @property
    def total_kwh(self) -> int:
        return self.heating_kwh + self.dhw_kwh + self.appliances_kwh

    def to_record(self) -> dict:
        return asdict(self)

@dataclass(frozen=True)
class SavingsRange:
    kwh_low: float
    kwh_mid: float
    kwh_high: float
    eur_mid: float  # EUR/month

@dataclass(frozen=True)
class AdviceItem:
    code: str
    title: str
    why: str
    how: str
    savings: SavingsRange
    difficulty: int  # 1 (trivial) - 5 (major works)
    comfort: int  # 1 (noticeable) - 5 (none)
    safety: Optional[str] = None

    def to_record(self) -> dict:
        record = asdict(self)
        if self.safety is None:
            record.pop("safety")
        return record

@dataclass(frozen=True)
class SiteVisitChecklist:
    orientation: Orientation = "south"
    roof_type: RoofType = "sloped"
    roof_angle: Optional[float] = 30.0  # degrees
    shading: Optional[Shading] = None
    insulation_quality: Quality = "average"
    windows_quality: Quality = "average"
    avg_monthly_kwh: Optional[float] = None
    lead_id: Optional[str] = None
    notes: Optional[str] = None

@dataclass(frozen=True)
class SolarSizing:
    system_size_kw: float
    annual_production_kwh: float
    strategy: Literal["profile", "consumption"]

@dataclass(frozen=True)
class Economics:
    cost_low_eur: int
    cost_high_eur: int
    annual_savings_eur: int
    payback_years: float
    co2_tons_per_year: float

@dataclass(frozen=True)
class LongTermProjection:
    annual_kwh_assumption: int
    install_cost_estimate_eur: int
    savings_25y_eur: int
    savings_25y_percent_vs_cost: int

@dataclass(frozen=True)
class BatteryRecommendation:
    recommended_kwh: float
    cost_low_eur: int
    cost_high_eur: int
    coverage_percent: int
    daily_production_kwh: int

@dataclass
class AuditResult:
    end_use: EndUseBreakdown
    score: int
    band: str
    advice: list[AdviceItem]
    used_fallback: bool

    def to_record(self) -> dict:
        """Fields appended to the stored audit row."""
        return {
            "score": self.score,
            "end_use": self.end_use.to_record(),
            "advice": [item.to_record() for item in self.advice],
        }

@dataclass
class SolarReport:
    checklist: SiteVisitChecklist
    readiness_score: int
    sizing: SolarSizing
    economics: Economics
    suggestions: list[dict]

    def to_record(self) -> dict:
        return {
            "lead_id": self.checklist.lead_id,
            "readiness_score": self.readiness_score,
            "system_size_kw": self.sizing.system_size_kw,
            "cost_low": self.economics.cost_low_eur,
            "cost_high": self.economics.cost_high_eur,
            "payback_years": self.economics.payback_years,
            "co2_saved_tons_per_year": self.economics.co2_tons_per_year,
            "suggestions": list(self.suggestions),
        }

@dataclass
class SolarAssessment:
    profile: AuditProfile
    sizing: SolarSizing
    economics: Economics
    projection: LongTermProjection
    battery: BatteryRecommendation

    def to_record(self) -> dict:
        return {
            "input": {
                "city": self.profile.city,
                "address": self.profile.address,
                "dwelling_type": self.profile.dwelling_type,
                "roof_type": self.profile.roof_type,
            },
            "potential": {
                "system_size_kw": self.sizing.system_size_kw,
                "annual_production_kwh": self.sizing.annual_production_kwh,
            },
            "economics": {
                "cost_low": self.economics.cost_low_eur,
                "cost_high": self.economics.cost_high_eur,
                "annual_savings_eur": self.economics.annual_savings_eur,
                "payback_years": self.economics.payback_years,
            },
            "impact": {
                "co2_saved_tons_per_year": self.economics.co2_tons_per_year,
            },
            "projection": asdict(self.projection),
            "battery": asdict(self.battery),
        }
