"""
Request validation.

    from wrongway.generation.params import validate_params
    request = validate_params({"scenario": "Queue", "roles": ["Visitor"], "tone": "Dry"})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from wrongway.errors import RequestError
from wrongway.generation.catalog import DEFAULT_LENGTH, LENGTHS, ROLES, SCENARIOS, TONES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JokeRequest:
    scenario: str
    roles: Tuple[str, ...]
    tone: str
    length: str = DEFAULT_LENGTH

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario,
            "roles": list(self.roles),
            "tone": self.tone,
            "length": self.length,
        }


def validate_params(params: Any) -> JokeRequest:
    """
    Validate raw request params and fill in defaults.

    Checks run in order and the first violation wins:
    params present, scenario, roles (list of 1–2), tone. A missing length
    becomes "medium". Values outside the known enumerations are accepted
    with a warning; the prompt already shows the generator the legal sets.

    Raises:
        RequestError: Naming the first missing/invalid field
    """
    if params is None or not isinstance(params, Mapping):
        raise RequestError("Missing params")

    scenario = params.get("scenario")
    if not scenario:
        raise RequestError("Missing scenario")

    roles = params.get("roles")
    if not isinstance(roles, (list, tuple)) or not 1 <= len(roles) <= 2:
        raise RequestError("Roles must be 1–2")

    tone = params.get("tone")
    if not tone:
        raise RequestError("Missing tone")

    length = params.get("length") or DEFAULT_LENGTH

    request = JokeRequest(
        scenario=str(scenario),
        roles=tuple(str(r) for r in roles),
        tone=str(tone),
        length=str(length),
    )

    if request.scenario not in SCENARIOS:
        logger.warning(f"Scenario '{request.scenario}' is not in the known scenario list")
    for role in request.roles:
        if role not in ROLES:
            logger.warning(f"Role '{role}' is not in the known role list")
    if request.tone not in TONES:
        logger.warning(f"Tone '{request.tone}' is not in the known tone list")
    if request.length not in LENGTHS:
        logger.warning(f"Length '{request.length}' is not one of {list(LENGTHS)}")

    return request
