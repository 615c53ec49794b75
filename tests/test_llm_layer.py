"""Tests for advice parsing, the live adapter boundary and the fallback list."""

import json
from types import SimpleNamespace

import pytest

from solarsense import llm_layer
from solarsense.llm_layer import (
    AdviceServiceError, HuggingFaceAdviceSource, StaticAdviceSource,
    build_prompt, parse_advice, rank_advice, fallback_advice,
)
from solarsense.schemas import AuditProfile, AdviceItem, SavingsRange


RAW_ACTIONS = [
    {
        "code": "BOILER_60",
        "title": "Set boiler to 60°C",
        "why": "Lower storage temperature reduces standing losses.",
        "how": "Turn the boiler dial to 60°C.",
        "savings": {"kwh_low": 5, "kwh_mid": 10, "kwh_high": 15, "eur_mid": 2},
        "difficulty": 1,
        "comfort": 5,
        "safety": "Do not go below 55°C.",
    },
    {
        "code": "DRAFT_SEAL",
        "title": "Seal window drafts",
        "why": "Drafts account for a large share of heat loss.",
        "how": "Apply foam strips to window frames.",
        "savings": {"kwh_low": 10, "kwh_mid": 20, "kwh_high": 30, "eur_mid": 4},
        "difficulty": 2,
        "comfort": 4,
    },
]


class FakeInferenceClient:
    content = json.dumps(RAW_ACTIONS)
    error = None
    requests = []

    def __init__(self, model=None, token=None):
        self.model = model
        self.token = token

    def chat_completion(self, messages, max_tokens, response_format=None):
        FakeInferenceClient.requests.append(
            {"messages": messages, "max_tokens": max_tokens, "response_format": response_format}
        )
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


@pytest.fixture
def fake_client(monkeypatch):
    FakeInferenceClient.content = json.dumps(RAW_ACTIONS)
    FakeInferenceClient.error = None
    FakeInferenceClient.requests = []
    monkeypatch.setattr(llm_layer, "InferenceClient", FakeInferenceClient)
    return FakeInferenceClient


@pytest.fixture
def profile():
    return AuditProfile(dwelling_type="house", thermostat_setpoint=23, water_tank_liters=120, city="Prizren")


def test_parse_json_array_keeps_order():
    advice = parse_advice(json.dumps(RAW_ACTIONS))

    assert [a.code for a in advice] == ["BOILER_60", "DRAFT_SEAL"]
    assert advice[0].savings == SavingsRange(kwh_low=5, kwh_mid=10, kwh_high=15, eur_mid=2)
    assert advice[0].safety == "Do not go below 55°C."
    assert advice[1].safety is None


def test_parse_object_with_actions_field():
    advice = parse_advice(json.dumps({"actions": RAW_ACTIONS}))
    assert len(advice) == 2


@pytest.mark.parametrize(
    "content",
    ["not json", "", json.dumps({"advice": RAW_ACTIONS}), json.dumps([]), json.dumps([{"title": "no code"}]), "42"],
)
def test_parse_rejects_unusable_content(content):
    with pytest.raises(AdviceServiceError):
        parse_advice(content)


def test_prompt_carries_context_and_safety_rules(profile):
    prompt = build_prompt(profile, 712)

    assert "Estimated monthly consumption: 712 kWh" in prompt
    assert "Hot water: electric_tank (120L)" in prompt
    assert "Location: Prizren" in prompt
    assert "Boiler temp: 55-65°C only" in prompt
    assert "Heating setpoint: 20-21°C recommended" in prompt
    assert "Never suggest unsafe DIY electrical work" in prompt


def test_fallback_list_is_fixed():
    advice = fallback_advice()

    assert [a.code for a in advice] == ["SETPOINT_20_21", "CURTAINS_DUSK", "DHW_OFFPEAK"]
    assert [(a.savings.kwh_low, a.savings.kwh_mid, a.savings.kwh_high, a.savings.eur_mid) for a in advice] == [
        (15, 20, 25, 4), (8, 12, 15, 2), (10, 18, 25, 3),
    ]
    assert [(a.difficulty, a.comfort) for a in advice] == [(1, 3), (1, 5), (2, 5)]
    assert advice[0].safety is None and advice[1].safety is None
    assert "licensed electrician" in advice[2].safety


def test_rank_advice_returns_external_items_unsorted(profile):
    items = parse_advice(json.dumps(list(reversed(RAW_ACTIONS))))
    advice, used_fallback = rank_advice(StaticAdviceSource(items), profile, 700)

    assert not used_fallback
    assert [a.code for a in advice] == ["DRAFT_SEAL", "BOILER_60"]


def test_rank_advice_falls_back_on_service_error(profile):
    source = StaticAdviceSource(error=AdviceServiceError("gateway timeout"))
    advice, used_fallback = rank_advice(source, profile, 700)

    assert used_fallback
    assert advice == fallback_advice()
    assert source.calls == 1


def test_rank_advice_falls_back_on_empty_list(profile):
    advice, used_fallback = rank_advice(StaticAdviceSource([]), profile, 700)
    assert used_fallback
    assert len(advice) == 3


def test_fallback_is_independent_of_profile():
    failing = StaticAdviceSource(error=AdviceServiceError("down"))
    first, _ = rank_advice(failing, AuditProfile(dwelling_type="office", thermostat_setpoint=26), 900)
    second, _ = rank_advice(failing, AuditProfile(dwelling_type="apartment", curtains="heavy"), 300)
    assert first == second


def test_live_source_without_token_falls_back(monkeypatch, fake_client, profile):
    monkeypatch.delenv("HF_TOKEN", raising=False)
    source = HuggingFaceAdviceSource()

    with pytest.raises(AdviceServiceError, match="HF_TOKEN"):
        source.generate(profile, 700)
    advice, used_fallback = rank_advice(source, profile, 700)
    assert used_fallback
    assert fake_client.requests == []


def test_live_source_parses_model_reply(fake_client, profile):
    source = HuggingFaceAdviceSource(token="hf_test", model="test/model", max_tokens=321)
    advice, used_fallback = rank_advice(source, profile, 700)

    assert not used_fallback
    assert [a.code for a in advice] == ["BOILER_60", "DRAFT_SEAL"]
    assert fake_client.requests[0]["max_tokens"] == 321
    assert "700 kWh" in fake_client.requests[0]["messages"][0]["content"]


def test_live_source_network_failure_falls_back(fake_client, profile):
    fake_client.error = ConnectionError("connection reset")
    advice, used_fallback = rank_advice(HuggingFaceAdviceSource(token="hf_test"), profile, 700)

    assert used_fallback
    assert [a.code for a in advice] == ["SETPOINT_20_21", "CURTAINS_DUSK", "DHW_OFFPEAK"]


def test_live_source_malformed_reply_falls_back(fake_client, profile):
    fake_client.content = "Here are some tips: turn things off."
    advice, used_fallback = rank_advice(HuggingFaceAdviceSource(token="hf_test"), profile, 700)

    assert used_fallback
    assert advice == fallback_advice()


def test_advice_record_omits_missing_safety():
    item = AdviceItem(
        code="X", title="t", why="w", how="h",
        savings=SavingsRange(kwh_low=1, kwh_mid=2, kwh_high=3, eur_mid=1), difficulty=1, comfort=5,
    )
    record = item.to_record()
    assert "safety" not in record
    assert record["savings"] == {"kwh_low": 1, "kwh_mid": 2, "kwh_high": 3, "eur_mid": 1}


def test_parse_fenced_reply():
    content = "```json\n" + json.dumps({"actions": RAW_ACTIONS}, indent=2) + "\n```"
    assert [a.code for a in parse_advice(content)] == ["BOILER_60", "DRAFT_SEAL"]


def test_live_source_requests_json_and_accepts_fenced_reply(fake_client, profile):
    fake_client.content = "```json\n" + json.dumps(RAW_ACTIONS) + "\n```"
    advice, used_fallback = rank_advice(HuggingFaceAdviceSource(token="hf_test"), profile, 700)

    assert not used_fallback
    assert [a.code for a in advice] == ["BOILER_60", "DRAFT_SEAL"]
    assert fake_client.requests[0]["response_format"] == {"type": "json_object"}


def test_prompt_asks_for_actions_object(profile):
    assert '{"actions": [...]}' in build_prompt(profile, 500)


def test_bad_max_tokens_setting_uses_default(monkeypatch):
    monkeypatch.setenv("SOLARSENSE_ADVICE_MAX_TOKENS", "lots")
    assert HuggingFaceAdviceSource(token="hf_test").max_tokens == 1500
