import json

import pytest

from sitetrack.core.config import settings
from sitetrack.utils import ai


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


@pytest.fixture()
def answer(monkeypatch):
    """Make Gemini answer with the given text."""
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")

    def set_text(text):
        payload = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
        monkeypatch.setattr(ai.requests, "post", lambda url, params=None, json=None, timeout=None: FakeResponse(payload))

    return set_text


def test_generate_content_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "")

    with pytest.raises(ai.AIServiceError):
        ai.generate_content("oi", "any-model")


def test_generate_content_without_candidates(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")
    monkeypatch.setattr(ai.requests, "post", lambda url, params=None, json=None, timeout=None: FakeResponse({}))

    with pytest.raises(ai.AIServiceError):
        ai.generate_content("oi", "any-model")


def test_parse_supply_list(answer):
    answer(json.dumps([
        {"name": "Curva 90 25mm", "quantity": 12, "unit": "pc"},
        {"name": "Cimento CP-II", "quantity": 30, "unit": ""},
    ]))

    items = ai.parse_supply_list("Descrição;Qtd\nCurva 90;12")

    assert items == [
        {"id": "preview-0", "name": "Curva 90 25mm", "quantity": 12, "unit": "pc", "checked": False},
        {"id": "preview-1", "name": "Cimento CP-II", "quantity": 30, "unit": "un", "checked": False},
    ]


def test_parse_supply_list_bad_answer(answer):
    answer("isto não é json")

    assert ai.parse_supply_list("qualquer coisa") == []


def test_risk_analysis_empty_answer(answer):
    answer("")

    assert ai.analyze_project_risk("contexto") == ai.RISK_UNAVAILABLE
