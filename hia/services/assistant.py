"""
Census Data Assistant: pass-through chat call to OpenAI.
────────────────────────────────────────────────────────────
• One system prompt (food & material insecurity data)
• Bounded retries; the last provider error is surfaced to the caller
• No conversation state is kept between calls
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from flask import current_app
from openai import OpenAIError

log = logging.getLogger(__name__)

MAX_INBOUND_LEN = int(os.getenv("AI_MAX_INBOUND_LEN", "4000"))

SYSTEM_PROMPT = os.getenv(
    "AI_CENSUS_SYSTEM_PROMPT",
    """You are a Census Data Assistant specializing in food and material insecurity data across the United States.

Your role is to provide accurate, up-to-date information about:
- Food insecurity rates by geographic location (state, county, city)
- SNAP (food stamps) participation rates
- Material insecurity indicators (housing, utilities, transportation)
- Demographics most affected by food insecurity
- College student hunger statistics
- Underserved community identification
- Poverty rates and economic indicators related to food access

Always cite data sources when possible (USDA, Census Bureau, Bureau of Labor Statistics, etc.) and provide specific numbers with context. If you don't have current data for a specific location, explain what general trends exist and suggest where to find more recent local data.

Keep responses informative but concise, focusing on actionable data that could help identify areas needing assistance.""",
)


class AssistantUnavailable(RuntimeError):
    """No OpenAI client is configured."""


class AssistantError(RuntimeError):
    """Every attempt against the provider failed."""


def _trim(s: str, limit: int) -> str:
    s = (s or "").strip()
    return s if len(s) <= limit else s[:limit]


def ask_census_assistant(message: str) -> str:
    client = current_app.extensions.get("openai")
    if client is None:
        raise AssistantUnavailable("AI assistant is not configured")

    cfg = current_app.config
    retries = max(0, int(cfg.get("OPENAI_MAX_RETRIES", 1)))
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _trim(message, MAX_INBOUND_LEN)},
    ]

    last_err: Optional[str] = None
    for attempt in range(1, retries + 2):
        try:
            resp = client.chat.completions.create(
                model=cfg.get("OPENAI_MODEL", "gpt-4o"),
                messages=messages,
                max_tokens=int(cfg.get("OPENAI_MAX_TOKENS", 1000)),
                temperature=float(cfg.get("OPENAI_TEMPERATURE", 0.7)),
            )
            return (resp.choices[0].message.content or "").strip()
        except OpenAIError as e:
            last_err = str(e)
            log.warning(
                "OpenAI attempt %s failed: %s",
                attempt,
                last_err,
                exc_info=(attempt == retries + 1),
            )

    raise AssistantError(last_err or "unknown_error")
