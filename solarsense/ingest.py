# Turns stored audit / site-visit rows (dicts or CSV exports) into engine inputs.
# Missing fields take the documented defaults; unknown vocabulary values are rejected here.

import math
import pandas as pd
from loguru import logger
from typing import get_args

from .schemas import (
    AuditProfile, SiteVisitChecklist, DwellingType, RoofType, HeatingType, WaterHeater,
    Curtains, Quality, Shading, Orientation,
)

def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value)) or value == ""

def _choice(row: dict, key: str, vocabulary, default):
    value = row.get(key)
    if _is_missing(value):
        return default
    value = str(value).strip().lower()
    allowed = get_args(vocabulary)
    if value not in allowed:
        raise ValueError(f"{key}={value!r} is not one of {', '.join(allowed)}")
    return value

def _number(row: dict, key: str, default):
    value = row.get(key)
    if _is_missing(value):
        return default
    return float(value)

def _text(row: dict, key: str):
    value = row.get(key)
    return None if _is_missing(value) else str(value)

def parse_audit_record(row: dict) -> AuditProfile:
    occupancy = row.get("occupancy")
    return AuditProfile(
        dwelling_type=_choice(row, "dwelling_type", DwellingType, "apartment"),
        roof_type=_choice(row, "roof_type", RoofType, "flat"),
        heating_type=_choice(row, "heating_type", HeatingType, "electric"),
        thermostat_setpoint=_number(row, "thermostat_setpoint", 21.0),
        water_heater=_choice(row, "water_heater", WaterHeater, "electric_tank"),
        water_tank_liters=_number(row, "water_tank_liters", None),
        curtains=_choice(row, "curtains", Curtains, "light"),
        insulation_level=_choice(row, "insulation_level", Quality, "average"),
        occupancy=occupancy if isinstance(occupancy, dict) else {},
        city=_text(row, "city"),
        address=_text(row, "address"),
    )

def parse_site_visit_record(row: dict) -> SiteVisitChecklist:
    return SiteVisitChecklist(
        orientation=_choice(row, "orientation", Orientation, "south"),
        roof_type=_choice(row, "roof_type", RoofType, "sloped"),
        roof_angle=_number(row, "roof_angle", None),
        shading=_choice(row, "shading", Shading, None),
        insulation_quality=_choice(row, "insulation_quality", Quality, "average"),
        windows_quality=_choice(row, "windows_quality", Quality, "average"),
        avg_monthly_kwh=_number(row, "avg_monthly_kwh", None),
        lead_id=_text(row, "lead_id"),
        notes=_text(row, "notes"),
    )

def load_audits_csv(file_path: str) -> list[AuditProfile]:
    df = pd.read_csv(file_path)
    logger.info("Loaded {} audit rows from {}", len(df), file_path)
    return [parse_audit_record(row) for row in df.to_dict(orient="records")]

def load_site_visits_csv(file_path: str) -> list[SiteVisitChecklist]:
    df = pd.read_csv(file_path, dtype={"lead_id": str})
    logger.info("Loaded {} site visit rows from {}", len(df), file_path)
    return [parse_site_visit_record(row) for row in df.to_dict(orient="records")]

def reports_frame(reports) -> pd.DataFrame:
    """Flatten SolarReport / SolarAssessment records into one row each for export."""
    rows = []
    for report in reports:
        record = report.to_record()
        flat = {}
        for key, value in record.items():
            if isinstance(value, dict):
                flat.update({f"{key}.{k}": v for k, v in value.items()})
            elif not isinstance(value, list):
                flat[key] = value
        rows.append(flat)
    return pd.DataFrame(rows)
