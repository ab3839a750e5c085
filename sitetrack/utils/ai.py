"""
Gemini helpers over the generateContent REST endpoint.

Every helper degrades to a fixed fallback (text or empty list) when the
API key is missing or the call fails, so AI features never break a page.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from sitetrack.core.config import settings

logger = logging.getLogger(__name__)

DAILY_LOG_UNAVAILABLE = "Resumo não disponível."
DAILY_LOG_ERROR = "Erro ao gerar diário via IA."
RISK_UNAVAILABLE = "Análise de risco não disponível."
RISK_ERROR = "Erro na análise de risco via IA."

SUPPLY_LIST_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "quantity": {"type": "NUMBER"},
            "unit": {"type": "STRING"},
        },
        "required": ["name", "quantity", "unit"],
    },
}


class AIServiceError(Exception):
    pass


def generate_content(prompt: str, model: str, generation_config: Optional[Dict[str, Any]] = None) -> str:
    """
    Call models/{model}:generateContent and return the first candidate's text.

    Raises:
        AIServiceError: missing key, HTTP failure or an empty answer
    """
    if not settings.gemini_api_key:
        raise AIServiceError("GEMINI_API_KEY is not configured")

    url = f"{settings.gemini_api_url.rstrip('/')}/{model}:generateContent"
    payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if generation_config:
        payload["generationConfig"] = generation_config

    try:
        response = requests.post(
            url,
            params={"key": settings.gemini_api_key},
            json=payload,
            timeout=settings.ai_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise AIServiceError(f"Gemini request failed: {e}") from e

    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        raise AIServiceError("Gemini returned no candidates") from e
    return "".join(part.get("text", "") for part in parts)


def generate_daily_log(
    tasks: Iterable[Any],
    weather: str,
    workforce: int,
    engineer_name: Optional[str],
) -> str:
    """Short technical summary for the daily report (RDO), in Brazilian Portuguese."""
    task_summary = "\n".join(f"- {task.name}: {task.progress}% ({task.status})" for task in tasks)
    prompt = (
        "Você é um assistente de engenharia civil. Com base nos dados abaixo, gere um breve "
        "resumo técnico para o Diário de Obras (RDO) em português brasileiro.\n"
        f"Engenheiro: {engineer_name or ''}\n"
        f"Clima: {weather}\n"
        f"Efetivo: {workforce} operários\n"
        "Status das Tarefas:\n"
        f"{task_summary}"
    )
    try:
        text = generate_content(prompt, settings.gemini_fast_model, {"temperature": 0.7})
    except AIServiceError as e:
        logger.error("generate_daily_log failed: %s", e)
        return DAILY_LOG_ERROR
    return text or DAILY_LOG_UNAVAILABLE


def analyze_project_risk(project_context: str) -> str:
    prompt = (
        "Analise os riscos técnicos e de cronograma para este projeto de construção:\n"
        f"{project_context}\n\n"
        "Identifique possíveis gargalos e forneça recomendações de mitigação. "
        "Responda em português brasileiro."
    )
    try:
        text = generate_content(prompt, settings.gemini_reasoning_model, {"temperature": 0.3})
    except AIServiceError as e:
        logger.error("analyze_project_risk failed: %s", e)
        return RISK_ERROR
    return text or RISK_UNAVAILABLE


def parse_supply_list(csv_content: str) -> List[Dict[str, Any]]:
    """
    Turn a messy CSV/text material list into supply items.

    Items get temporary ids (preview-N), unit defaults to 'un' and every
    item starts unchecked. Returns [] on any failure.
    """
    prompt = (
        "You are an expert construction data analyst.\n"
        "I will provide a raw CSV/text that represents a list of materials (Supplies).\n"
        "The format might be messy, contain headers in the middle, or different column names.\n\n"
        "Your goal is to extract a structured list of items.\n\n"
        "Rules:\n"
        "1. Identify the 'name' (Combine Description and Dimension if available to make it specific, "
        "e.g., \"Curva 90 25mm\").\n"
        "2. Identify the 'quantity' (Look for columns like 'Qtd', 'Quant', 'Quantidade', 'Total'). "
        "If there are multiple numbers, pick the one that looks like the Total quantity.\n"
        "3. Identify the 'unit' (e.g., pc, un, m, kg, br). If missing, infer 'un'.\n"
        "4. Ignore rows that look like Section Titles (e.g., \"ÁGUA FRIA\") or empty rows.\n"
        "5. Return a JSON array.\n\n"
        f"CSV Content:\n{csv_content}"
    )
    config = {"responseMimeType": "application/json", "responseSchema": SUPPLY_LIST_SCHEMA}
    try:
        text = generate_content(prompt, settings.gemini_fast_model, config)
        if not text:
            return []
        parsed = json.loads(text)
        return [
            {
                "id": f"preview-{index}",
                "name": item["name"],
                "quantity": item["quantity"],
                "unit": item.get("unit") or "un",
                "checked": False,
            }
            for index, item in enumerate(parsed)
        ]
    except (AIServiceError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error("parse_supply_list failed: %s", e)
        return []
