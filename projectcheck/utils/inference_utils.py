"""
Access to the Hugging Face Inference backend used by the model-based analyzers.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from huggingface_hub import InferenceClient

from projectcheck.config import ANALYSIS_TIMEOUT_MS, HF_ANALYSIS_MODEL, HF_TOKEN
from projectcheck.errors import AnalysisBackendError

logger = logging.getLogger("projectcheck.inference")

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def build_inference_client(timeout_ms: int = ANALYSIS_TIMEOUT_MS) -> InferenceClient:
    if not HF_TOKEN:
        logger.warning("HF_TOKEN not set; model-based analysis will fall back to rule-based")
    return InferenceClient(api_key=HF_TOKEN or None, timeout=timeout_ms / 1000)


def extract_json(reply: str) -> Dict[str, Any]:
    """Pull the first {...} block out of a model reply, tolerating prose or code fences around it."""
    match = _JSON_BLOCK.search(reply or "")
    if not match:
        raise AnalysisBackendError("model reply contained no JSON object")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisBackendError(f"model reply was not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnalysisBackendError("model reply JSON was not an object")
    return data


def ask_for_json(
    client: InferenceClient,
    system_prompt: str,
    prompt: str,
    model: Optional[str] = None,
    max_tokens: int = 1200,
) -> Dict[str, Any]:
    messages: List[Dict[str, str]] = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": prompt},
    ]
    try:
        completion = client.chat_completion(
            messages=messages,
            model=model or HF_ANALYSIS_MODEL,
            max_tokens=max_tokens,
            temperature=0.3,
        )
    except Exception as e:
        raise AnalysisBackendError(f"inference call failed: {e}") from e

    try:
        reply = completion.choices[0].message.content or ""
    except (AttributeError, IndexError) as e:
        raise AnalysisBackendError(f"unexpected completion shape: {e}") from e

    logger.debug(f"Model raw reply: {reply[:500]}")
    return extract_json(reply)
