import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from solarsense.ingest import parse_audit_record, parse_site_visit_record
from solarsense.pipeline import run_audit, run_site_visit, run_solar_potential
from solarsense.scoring import score_band, difficulty_band

def ask(prompt: str, default: str) -> str:
    answer = input(f"{prompt} [{default}]: ").strip()
    return answer or default

def audit_walkthrough():
    row = {
        "city": ask("City", "Prishtina"),
        "dwelling_type": ask("Dwelling (apartment, house, office)", "apartment"),
        "roof_type": ask("Roof (flat, sloped)", "flat"),
        "heating_type": ask("Heating (electric, wood, pellet, gas, district)", "electric"),
        "thermostat_setpoint": ask("Thermostat setpoint (°C)", "21"),
        "water_heater": ask("Hot water (electric_tank, instant, solar)", "electric_tank"),
        "water_tank_liters": ask("Tank size in liters (blank if none)", ""),
        "curtains": ask("Curtains (none, light, heavy)", "light"),
        "insulation_level": ask("Insulation (poor, average, good)", "average"),
    }
    try:
        profile = parse_audit_record(row)
    except ValueError as e:
        print(f"Invalid answer: {e}")
        return

    result = run_audit(profile)
    _, message = score_band(result.score)
    print(f"\nEstimated consumption: {result.end_use.total_kwh} kWh/month")
    print(f"  Heating: {result.end_use.heating_kwh} kWh, hot water: {result.end_use.dhw_kwh} kWh, appliances: {result.end_use.appliances_kwh} kWh")
    print(f"Efficiency score: {result.score} - {message}")
    if result.used_fallback:
        print("(Personalised advice unavailable, showing standard actions. Set HF_TOKEN.)")
    for i, item in enumerate(result.advice, 1):
        print(f"{i}. {item.title} [{difficulty_band(item.difficulty)}] ~{item.savings.kwh_mid} kWh / €{item.savings.eur_mid} per month")
        if item.safety:
            print(f"   Safety: {item.safety}")

    solar = run_solar_potential(profile)
    print(f"\nSolar potential: {solar.sizing.system_size_kw} kW, {solar.sizing.annual_production_kwh} kWh/year")
    print(f"  Cost €{solar.economics.cost_low_eur}-€{solar.economics.cost_high_eur}, payback {solar.economics.payback_years} years")
    print(f"  25-year savings €{solar.projection.savings_25y_eur} ({solar.projection.savings_25y_percent_vs_cost}% of system cost)")
    print(f"  Battery: {solar.battery.recommended_kwh} kWh, €{solar.battery.cost_low_eur}-€{solar.battery.cost_high_eur}, ~{solar.battery.coverage_percent}% of daily PV")

def site_visit_walkthrough():
    row = {
        "orientation": ask("Roof orientation", "south"),
        "roof_type": ask("Roof (flat, sloped)", "sloped"),
        "roof_angle": ask("Roof angle (degrees)", "25"),
        "shading": ask("Shading (none, light, moderate, heavy)", "light"),
        "insulation_quality": ask("Insulation (poor, average, good)", "average"),
        "windows_quality": ask("Windows (poor, average, good)", "average"),
        "avg_monthly_kwh": ask("Avg. electricity use (kWh/month)", "350"),
    }
    try:
        checklist = parse_site_visit_record(row)
    except ValueError as e:
        print(f"Invalid answer: {e}")
        return

    report = run_site_visit(checklist)
    print(f"\nSolar readiness score: {report.readiness_score}%")
    print(f"Recommended system: {report.sizing.system_size_kw} kW, {report.sizing.annual_production_kwh:.0f} kWh/year")
    print(f"Cost €{report.economics.cost_low_eur}-€{report.economics.cost_high_eur}, payback {report.economics.payback_years} years, CO₂ {report.economics.co2_tons_per_year} t/year")
    for s in report.suggestions:
        print(f"- {s['title']} ({s['when']}): {s['detail']}")

if __name__ == "__main__":
    print("Welcome to SolarSense!")
    mode = ask("Run a home audit or a technician site visit? (audit, visit)", "audit")
    if mode.lower().startswith("v"):
        site_visit_walkthrough()
    else:
        audit_walkthrough()
