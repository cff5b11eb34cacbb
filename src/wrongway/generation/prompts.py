"""
Prompt construction for single-call joke generation.

The prompt shows the generator the exact legal value sets, the concrete
request, the six allowed endings verbatim and the JSON output contract.
Tones with a ToneRule get their constraint block appended.

Example:
    from wrongway.generation.prompts import build_prompt, SYSTEM_PROMPT

    prompt = build_prompt(request)
"""

from __future__ import annotations

import logging

from wrongway.generation.catalog import ENDINGS, LENGTHS, ROLES, SCENARIOS, TONES, tone_rule
from wrongway.generation.params import JokeRequest

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = "You are a careful writer that follows instructions exactly and outputs strict JSON only."

CLOSING_LINE = "Return ONLY the JSON object. No preface, no postface, no code fences."


def _value_set(values) -> str:
    return "{" + ", ".join(values) + "}"


def tone_block(request: JokeRequest) -> str:
    """
    Constraint block for the request's tone, or "" when the tone has no extras.
    """
    rule = tone_rule(request.tone)
    if rule is None:
        return ""
    return rule.addendum(request)


def build_prompt(request: JokeRequest) -> str:
    """
    Build the user prompt for one joke.

    Args:
        request: Validated JokeRequest

    Returns:
        Prompt string; identical requests always give identical prompts.
    """
    endings_list = "\n".join(f"- {e}" for e in ENDINGS)

    base = f"""
INSTRUCTIONS FOR THE LLM — GENERATE ONE JOKE

Inputs (exact allowed sets):
- SCENARIO: one of {_value_set(SCENARIOS)}
- ROLES: one or two roles from {_value_set(ROLES)}
- TONE: one of {_value_set(TONES)}
- LENGTH: one of {_value_set(LENGTHS)}  (hint to style; NOT a hard limit)

USE THESE INPUTS FOR THIS CALL:
SCENARIO = {request.scenario}
ROLES = {", ".join(request.roles)}
TONE = {request.tone}
LENGTH = {request.length}

Premise:
Every joke MUST end with a short realization line (the "mishap line") that is EXACTLY one of the allowed endings below.

Structure / formatting (STRICT):
1) Output strictly as JSON (no extra commentary) with keys:
   "joke" (string), "scenario" (string), "roles" (array), "tone" (string),
   "length" (string), "ending_phrase" (string), "tags" (array).
2) Use only ENGLISH in "joke" and "ending_phrase".
3) Keep it reasonably concise; there are NO strict character/line limits.
4) If ROLES has two items, write a short interaction; if one, a monologue is acceptable.
5) Avoid hateful/violent content and real-person defamation.
6) If you cannot comply, return {{"joke":"","error":"reason"}} strictly as JSON.

Allowed endings (choose one, verbatim):
{endings_list}

IMPORTANT — ENDING INTEGRATION (STRICT):
- The ending is the ONLY explicit admission of error, and it must appear ONLY ONCE as the LAST line.
- NO apology or self-correction words BEFORE the ending (e.g., "sorry", "wrong", "not the way", "messed it up", "backwards", "lost it").
- The ending INTERRUPTS the delivery (abrupt cut): do NOT deliver a classical punchline and then the ending. The ending replaces any punchline.
""".strip()

    extra = tone_block(request)
    if extra:
        logger.debug(f"Appending tone block for '{request.tone}' ({len(extra)} chars)")
        return f"{base}\n\n{extra}\n\n{CLOSING_LINE}"
    return f"{base}\n\n{CLOSING_LINE}"
