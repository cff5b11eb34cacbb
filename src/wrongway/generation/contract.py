"""
JSON contract check for model output.

Example:
    fields = validate_contract(extract_json(text), request, raw=text)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from wrongway.errors import ContractError
from wrongway.generation.params import JokeRequest

logger = logging.getLogger(__name__)


REQUIRED_KEYS = ("joke", "scenario", "roles", "tone", "length", "ending_phrase", "tags")


def validate_contract(
    candidate: str,
    request: JokeRequest,
    raw: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Parse and check a candidate JSON string against the joke contract.

    Args:
        candidate: Output of extract_json
        request: The validated request; its scenario/roles/tone/length are
                 stamped onto the result whatever the model echoed
        raw: Original model text, attached to any ContractError

    Returns:
        Dict with joke, scenario, roles, tone, length, ending_phrase, tags

    Raises:
        ContractError: Unparseable JSON, refusal, missing key or bad types
    """
    raw = candidate if raw is None else raw

    try:
        obj = json.loads(candidate)
    except (TypeError, ValueError):
        raise ContractError("Model output is not parseable JSON", raw=raw)

    if not isinstance(obj, dict):
        raise ContractError("Model output is not a JSON object", raw=raw)

    if not obj.get("joke") and obj.get("error"):
        raise ContractError(f"Model declined: {obj['error']}", raw=raw)

    for key in REQUIRED_KEYS:
        if key not in obj:
            raise ContractError(f"Missing key: {key}", raw=raw)

    joke = obj["joke"]
    if not isinstance(joke, str) or not joke.strip():
        raise ContractError("Empty joke", raw=raw)

    roles = obj["roles"]
    if not isinstance(roles, list) or not 1 <= len(roles) <= 2:
        raise ContractError("roles must be array(1–2)", raw=raw)

    tags = obj["tags"]
    if not isinstance(tags, list):
        logger.debug(f"Discarding non-list tags: {tags!r}")
        tags = []

    echoed = (obj["scenario"], obj["tone"], obj["length"])
    if echoed != (request.scenario, request.tone, request.length) or list(roles) != list(request.roles):
        logger.debug(
            f"Model echoed {echoed}/{roles}, restamping with request values"
        )

    ending_phrase = obj["ending_phrase"]

    return {
        "joke": joke,
        "scenario": request.scenario,
        "roles": list(request.roles),
        "tone": request.tone,
        "length": request.length,
        "ending_phrase": ending_phrase if isinstance(ending_phrase, str) else "",
        "tags": [str(t) for t in tags],
    }
