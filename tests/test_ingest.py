"""Tests for turning stored rows and CSV exports into engine inputs."""

import pandas as pd
import pytest

from solarsense.ingest import (
    parse_audit_record, parse_site_visit_record, load_audits_csv, load_site_visits_csv, reports_frame,
)
from solarsense.pipeline import run_site_visit
from solarsense.schemas import AuditProfile, SiteVisitChecklist


def test_empty_audit_row_takes_defaults():
    assert parse_audit_record({}) == AuditProfile()


def test_audit_row_normalises_values():
    profile = parse_audit_record({
        "dwelling_type": " House ",
        "thermostat_setpoint": "23",
        "water_heater": "electric_tank",
        "water_tank_liters": "",
        "curtains": "none",
        "insulation_level": "poor",
        "city": "Prizren",
        "occupancy": {"weekday": "evenings"},
    })

    assert profile.dwelling_type == "house"
    assert profile.thermostat_setpoint == 23.0
    assert profile.water_tank_liters is None
    assert profile.occupancy == {"weekday": "evenings"}


def test_audit_row_rejects_unknown_vocabulary():
    with pytest.raises(ValueError, match="heating_type"):
        parse_audit_record({"heating_type": "nuclear"})


def test_site_visit_row_keeps_missing_shading_unspecified():
    checklist = parse_site_visit_record({"orientation": "southwest", "roof_angle": 35, "avg_monthly_kwh": 410})

    assert checklist.shading is None
    assert checklist.orientation == "southwest"
    assert checklist.roof_angle == 35.0


def test_site_visit_row_rejects_bad_orientation():
    with pytest.raises(ValueError, match="orientation"):
        parse_site_visit_record({"orientation": "up"})


def test_load_site_visits_csv(tmp_path):
    csv_path = tmp_path / "site_visits.csv"
    pd.DataFrame([
        {"lead_id": "a", "orientation": "south", "roof_angle": 30, "shading": "none",
         "insulation_quality": "good", "windows_quality": "good", "avg_monthly_kwh": 350},
        {"lead_id": "b", "orientation": "north", "roof_angle": None, "shading": None,
         "insulation_quality": "poor", "windows_quality": "average", "avg_monthly_kwh": None},
    ]).to_csv(csv_path, index=False)

    checklists = load_site_visits_csv(str(csv_path))

    assert [c.lead_id for c in checklists] == ["a", "b"]
    assert checklists[1].shading is None
    assert checklists[1].avg_monthly_kwh is None
    assert checklists[1].roof_angle is None


def test_load_audits_csv(tmp_path):
    csv_path = tmp_path / "audits.csv"
    pd.DataFrame([
        {"dwelling_type": "office", "thermostat_setpoint": 22, "water_heater": "instant", "city": None},
    ]).to_csv(csv_path, index=False)

    profiles = load_audits_csv(str(csv_path))

    assert profiles == [AuditProfile(dwelling_type="office", thermostat_setpoint=22.0, water_heater="instant")]


def test_reports_frame_flattens_records():
    reports = [
        run_site_visit(SiteVisitChecklist(lead_id="a", avg_monthly_kwh=350, shading="light")),
        run_site_visit(SiteVisitChecklist(lead_id="b", avg_monthly_kwh=600, shading="heavy")),
    ]
    df = reports_frame(reports)

    assert list(df["lead_id"]) == ["a", "b"]
    assert "suggestions" not in df.columns
    assert df.loc[0, "system_size_kw"] == 3.5


def test_numeric_lead_ids_stay_verbatim(tmp_path):
    csv_path = tmp_path / "site_visits.csv"
    csv_path.write_text("lead_id,orientation,avg_monthly_kwh\n7,south,350\n,east,400\n0012,west,300\n")

    checklists = load_site_visits_csv(str(csv_path))

    assert [c.lead_id for c in checklists] == ["7", None, "0012"]
