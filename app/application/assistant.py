"""
EcoHelper assistant and truck ETA via the Gemini REST API.

Both calls are best effort: failures are logged and turned into fixed replies.
"""
import logging

import requests

from app.config import get_settings
from app.domain.tracking import format_eta, ETA_NOT_AVAILABLE

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

UNAVAILABLE_REPLY = "Sorry, the AI chatbot is currently unavailable. Please check the API key configuration."
ERROR_REPLY = "Sorry, I'm having trouble connecting to my brain right now. Please try again later."
GREETING = "Hello! I'm EcoHelper. How can I assist you with waste management today?"

SYSTEM_INSTRUCTION = """You are EcoHelper, a friendly and knowledgeable AI assistant for the EcoTrack Solid Waste Management app. Your purpose is to help users with their questions about waste management.

You should be able to:
- Provide clear and concise information on waste segregation (wet, dry, hazardous).
- Give tips on composting and recycling.
- Explain the benefits of proper waste management.
- Answer questions about using the EcoTrack app features.
- Encourage users in their efforts to be environmentally friendly.

Rules:
- Keep your answers brief and easy to understand.
- Use a positive and encouraging tone.
- If a user asks a question outside the scope of waste management or the app, politely state that you can only assist with topics related to waste management.
- Do not provide personal opinions, financial advice, or medical advice.
"""


def _generate(prompt: str, system_instruction: str | None = None) -> str:
    cfg = get_settings()
    body = {"contents": [{"parts": [{"text": prompt}]}]}
    if system_instruction:
        body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    resp = requests.post(
        GEMINI_URL.format(model=cfg.GEMINI_MODEL),
        params={"key": cfg.GEMINI_API_KEY},
        json=body,
        timeout=15,
    )
    resp.raise_for_status()
    data = resp.json()
    parts = data["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


def get_chatbot_response(prompt: str) -> str:
    if not get_settings().GEMINI_API_KEY:
        return UNAVAILABLE_REPLY
    try:
        return _generate(prompt, SYSTEM_INSTRUCTION)
    except Exception:
        logger.exception("Gemini chat request failed")
        return ERROR_REPLY


def get_eta(driver_location: tuple[float, float], user_location: tuple[float, float]) -> str | None:
    """
    Driving time label between two (lat, lng) points.

    Returns:
        "12 min" / "< 1 min" / "Not available", or None when the assistant is not configured
    """
    if not get_settings().GEMINI_API_KEY:
        logger.warning("Gemini API key not configured, ETA disabled")
        return None

    prompt = (
        f"What is the estimated driving time from latitude {driver_location[0]}, "
        f"longitude {driver_location[1]} to latitude {user_location[0]}, "
        f"longitude {user_location[1]}? Respond with only the number of minutes, for example: '15'."
    )
    try:
        text = _generate(prompt)
    except Exception:
        logger.exception("Gemini ETA request failed")
        return ETA_NOT_AVAILABLE

    eta = format_eta(text)
    if eta == ETA_NOT_AVAILABLE:
        logger.warning("Could not parse ETA from reply: %r", text)
    return eta
