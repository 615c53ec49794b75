from huggingface_hub import InferenceClient
import json
import re
from typing import Optional, Protocol
from loguru import logger

from .config import get_settings
from .schemas import AuditProfile, AdviceItem, SavingsRange

ADVICE_PROMPT = """You are SolarSense, an energy efficiency advisor for Kosovo households and SMEs.

Profile:
- Location: {city}
- Dwelling: {dwelling_type}
- Heating: {heating_type}
- Thermostat: {thermostat_setpoint}°C
- Hot water: {water_heater}{tank}
- Curtains: {curtains}
- Insulation: {insulation_level}
- Estimated monthly consumption: {total_kwh:.0f} kWh

Generate 8-10 prioritized energy-saving actions, highest impact and lowest effort first. Focus on:
1. Behavior changes (low cost, high impact)
2. Quick wins (draft sealing, curtain usage)
3. Heating/DHW optimization
4. Safety-first recommendations

Return a JSON object of the form {{"actions": [...]}} where each action has this structure:
{{
  "code": "ACTION_CODE",
  "title": "Action title",
  "why": "Brief explanation of why this helps (1-2 sentences)",
  "how": "Practical implementation steps with specific times/values",
  "savings": {{"kwh_low": 10, "kwh_mid": 15, "kwh_high": 20, "eur_mid": 3}},
  "difficulty": 2,
  "comfort": 3,
  "safety": "Optional safety note"
}}

Safety rules:
- Boiler temp: 55-65°C only
- Heating setpoint: 20-21°C recommended
- Never suggest unsafe DIY electrical work
"""


class AdviceServiceError(Exception):
    """The external advice service could not produce a usable advice list."""


class AdviceSource(Protocol):
    """Produces ranked advice; implementations raise AdviceServiceError on any failure."""

    def generate(self, profile: AuditProfile, total_kwh: float) -> list[AdviceItem]:
        ...


def build_prompt(profile: AuditProfile, total_kwh: float) -> str:
    tank = f" ({profile.water_tank_liters:g}L)" if profile.water_tank_liters else ""
    return ADVICE_PROMPT.format(
        city=profile.city or "unknown",
        dwelling_type=profile.dwelling_type,
        heating_type=profile.heating_type,
        thermostat_setpoint=profile.thermostat_setpoint,
        water_heater=profile.water_heater,
        tank=tank,
        curtains=profile.curtains,
        insulation_level=profile.insulation_level,
        total_kwh=total_kwh,
    )


def advice_item_from_dict(raw: dict) -> AdviceItem:
    savings = raw.get("savings") or {}
    return AdviceItem(
        code=str(raw["code"]),
        title=str(raw["title"]),
        why=str(raw.get("why", "")),
        how=str(raw.get("how", "")),
        savings=SavingsRange(
            kwh_low=savings.get("kwh_low", 0),
            kwh_mid=savings.get("kwh_mid", 0),
            kwh_high=savings.get("kwh_high", 0),
            eur_mid=savings.get("eur_mid", 0),
        ),
        difficulty=int(raw.get("difficulty", 3)),
        comfort=int(raw.get("comfort", 3)),
        safety=raw.get("safety") or None,
    )


CODE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fence(content):
    # Models often wrap JSON in a ```json ... ``` block
    if not isinstance(content, str):
        return content
    match = CODE_FENCE.match(content)
    return match.group(1) if match else content


def parse_advice(content: str) -> list[AdviceItem]:
    """Parse model output: a JSON array, or an object carrying an ``actions`` array.

    Item order is kept as returned; the model is asked to rank by impact.
    """
    try:
        parsed = json.loads(strip_code_fence(content))
    except (TypeError, json.JSONDecodeError) as e:
        raise AdviceServiceError(f"Advice response is not JSON: {e}") from e
    if isinstance(parsed, dict):
        items = parsed.get("actions")
    else:
        items = parsed
    if not isinstance(items, list):
        items = None
    if not items:
        raise AdviceServiceError("Advice response carried no actions")
    try:
        return [advice_item_from_dict(raw) for raw in items]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise AdviceServiceError(f"Malformed advice item: {e}") from e


class HuggingFaceAdviceSource:
    """Live advice generation through the Hugging Face inference API."""

    def __init__(self, token: Optional[str] = None, model: Optional[str] = None,
                 max_tokens: Optional[int] = None):
        settings = get_settings()
        self.token = token or settings.hf_token
        self.model = model or settings.advice_model
        self.max_tokens = max_tokens or settings.advice_max_tokens

    def generate(self, profile: AuditProfile, total_kwh: float) -> list[AdviceItem]:
        if not self.token:
            raise AdviceServiceError("HF_TOKEN not set")
        client = InferenceClient(model=self.model, token=self.token)
        try:
            response = client.chat_completion(
                messages=[{"role": "user", "content": build_prompt(profile, total_kwh)}],
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content
        except Exception as e:
            # Network, auth, rate limit and gateway errors all surface here
            raise AdviceServiceError(f"Advice request failed: {e}") from e
        return parse_advice(content)


class StaticAdviceSource:
    """Deterministic source for tests and offline runs."""

    def __init__(self, items: Optional[list[AdviceItem]] = None, error: Optional[Exception] = None):
        self.items = list(items or [])
        self.error = error
        self.calls = 0

    def generate(self, profile: AuditProfile, total_kwh: float) -> list[AdviceItem]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


FALLBACK_ADVICE = (
    AdviceItem(
        code="SETPOINT_20_21",
        title="Lower thermostat to 20-21°C",
        why="Each degree reduction saves ~6% on heating costs without major comfort loss.",
        how="Set your thermostat to 20-21°C. Wear a light sweater indoors during colder months.",
        savings=SavingsRange(kwh_low=15, kwh_mid=20, kwh_high=25, eur_mid=4),
        difficulty=1,
        comfort=3,
    ),
    AdviceItem(
        code="CURTAINS_DUSK",
        title="Close curtains at dusk",
        why="Heavy curtains reduce heat loss through windows by up to 25%.",
        how="Close all curtains around sunset (typically 17:00-18:00 in winter) to retain warmth. Open them in morning sunlight.",
        savings=SavingsRange(kwh_low=8, kwh_mid=12, kwh_high=15, eur_mid=2),
        difficulty=1,
        comfort=5,
    ),
    AdviceItem(
        code="DHW_OFFPEAK",
        title="Heat water during off-peak hours",
        why="Shifting hot water heating to 22:00-06:00 reduces costs with time-of-use tariffs.",
        how="Install a timer on your water heater to run only during 22:00-06:00. Tank insulation keeps water hot throughout the day.",
        savings=SavingsRange(kwh_low=10, kwh_mid=18, kwh_high=25, eur_mid=3),
        difficulty=2,
        comfort=5,
        safety="Have a licensed electrician install the timer to avoid electrical hazards.",
    ),
)


def fallback_advice() -> list[AdviceItem]:
    return list(FALLBACK_ADVICE)


def rank_advice(source: AdviceSource, profile: AuditProfile, total_kwh: float) -> tuple[list[AdviceItem], bool]:
    """Return (advice, used_fallback). Never raises for advice-service failures."""
    try:
        advice = source.generate(profile, total_kwh)
    except AdviceServiceError as e:
        logger.warning("Advice service unavailable, using fallback advice: {}", e)
        return fallback_advice(), True
    if not advice:
        logger.warning("Advice service returned no actions, using fallback advice")
        return fallback_advice(), True
    logger.info("Received {} advice items from {}", len(advice), type(source).__name__)
    return advice, False
