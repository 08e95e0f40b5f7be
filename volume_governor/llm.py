"""Shared JSON-mode call for the generative collaborators.

Uses google-genai SDK (not google-generativeai) for GCP service account auth.

Every failure that leaves the caller without usable output surfaces as
CollaboratorFailure:
- rate limits (429 / RESOURCE_EXHAUSTED) back off and retry, then fail
- truncated, empty, non-JSON or incomplete responses fail immediately
Other transport errors propagate unchanged.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

from google import genai
from google.genai.types import GenerateContentConfig

from volume_governor.config import (
    LLM_BASE_DELAY_SECS,
    LLM_MAX_RETRIES,
    PROJECT_ID,
    REGION,
)
from volume_governor.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

# Singleton GenAI client (reused across collaborators)
_client: Optional[genai.Client] = None


def _get_genai_client() -> genai.Client:
    global _client
    if _client is None:
        _client = genai.Client(vertexai=True, project=PROJECT_ID, location=REGION)
    return _client


def _is_rate_limited(error: Exception) -> bool:
    text = str(error)
    return "429" in text or "RESOURCE_EXHAUSTED" in text


def _generate(model_name: str, contents: List[str], temperature: float) -> Any:
    client = _get_genai_client()
    config = GenerateContentConfig(temperature=temperature, response_mime_type="application/json")
    for attempt in range(LLM_MAX_RETRIES + 1):
        try:
            return client.models.generate_content(model=model_name, contents=contents, config=config)
        except Exception as e:
            if not _is_rate_limited(e):
                raise
            if attempt == LLM_MAX_RETRIES:
                raise CollaboratorFailure(f"{model_name} still rate limited after retries", cause=e) from e
            delay = LLM_BASE_DELAY_SECS * (2 ** attempt)
            logger.warning(
                "Rate limited (attempt %d/%d), retrying in %.0fs", attempt + 1, LLM_MAX_RETRIES, delay,
            )
            time.sleep(delay)


def _parse(response: Any, model_name: str, required_keys: Optional[List[str]]) -> Dict[str, Any]:
    finish_reason = response.candidates[0].finish_reason if response.candidates else None
    if finish_reason and str(finish_reason).endswith("MAX_TOKENS"):
        raise CollaboratorFailure(f"{model_name} response truncated (MAX_TOKENS)")

    text = (response.text or "").strip()
    if not text:
        raise CollaboratorFailure(f"{model_name} returned no text")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CollaboratorFailure(f"{model_name} returned invalid JSON", cause=e) from e
    if not isinstance(data, dict):
        raise CollaboratorFailure(f"{model_name} returned {type(data).__name__}, expected an object")

    missing = [k for k in required_keys or [] if k not in data]
    if missing:
        raise CollaboratorFailure(f"{model_name} response missing keys: {missing}")
    return data


def call_json(
    model_name: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    required_keys: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Call the model in JSON response mode and return the parsed object.

    Raises:
        CollaboratorFailure: Rate limit outlasted the retries, or the
            response is unusable
    """
    response = _generate(model_name, [system_prompt.strip(), user_prompt.strip()], temperature)
    try:
        data = _parse(response, model_name, required_keys)
    except CollaboratorFailure as e:
        logger.error("%s", e)
        raise
    logger.info("LLM call succeeded, model=%s", model_name)
    return data
