"""
Mishap-line enforcement.

Whatever the model wrote, the joke that leaves this module ends with exactly
one catalog ending and contains no other catalog ending anywhere before it.

Example:
    joke, ending = enforce_ending("He waits in line and that's the joke.", "Oops", "Dry")
    # joke == "He waits in line and that's the joke — " + ending
"""

from __future__ import annotations

import random
import re
from typing import Optional, Tuple

from wrongway.generation.catalog import ENDINGS, tone_rule

# Trailing whitespace, sentence punctuation, closing quotes/brackets and dashes.
_TAIL_RE = re.compile(r"[\s.,!?…\"'’”)\]}:;\-–—]+$")

# A catalog ending plus any spaces/tabs right before it.
_PURGE_RES = tuple(re.compile(r"[ \t]*" + re.escape(e)) for e in ENDINGS)


def pick_ending(rng: Optional[random.Random] = None) -> str:
    """Uniform choice from the catalog."""
    return (rng or random).choice(ENDINGS)


def select_ending(
    joke: str,
    claimed: Optional[str],
    tone: str,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Decide which catalog ending the joke gets.

    Priority: the tone's forced ending, the model's claimed ending if it is
    verbatim in the catalog, a catalog ending the joke already ends with,
    and finally a random catalog entry.
    """
    rule = tone_rule(tone)
    if rule is not None and rule.forced_ending:
        return rule.forced_ending

    claimed = (claimed or "").strip()
    if claimed in ENDINGS:
        return claimed

    tail = joke.strip()
    for ending in ENDINGS:
        if tail.endswith(ending):
            return ending

    return pick_ending(rng)


def strip_endings(text: str) -> str:
    """Remove every occurrence of every catalog ending from text."""
    previous = None
    while previous != text:
        previous = text
        for pattern in _PURGE_RES:
            text = pattern.sub("", text)
    return text


def _abrupt_cut(text: str) -> str:
    return _TAIL_RE.sub("", text)


def attach_ending(head: str, ending: str, multiline: Optional[bool] = None) -> str:
    """Join head and ending: newline for multi-line text, em-dash otherwise."""
    if not head:
        return ending
    if multiline is None:
        multiline = "\n" in head
    separator = "\n" if multiline else " — "
    return head + separator + ending


def enforce_ending(
    joke: str,
    claimed: Optional[str],
    tone: str,
    rng: Optional[random.Random] = None,
) -> Tuple[str, str]:
    """
    Make the joke end with exactly one catalog ending.

    Args:
        joke: Joke text from the model
        claimed: The model's ending_phrase field
        tone: Request tone (may force a specific ending)
        rng: Random source for the fallback choice

    Returns:
        (joke, ending_phrase) with the ending as the only catalog text in the
        joke, placed as a suffix after an abrupt cut.
    """
    ending = select_ending(joke, claimed, tone, rng)

    text = joke.rstrip()
    idx = text.rfind(ending)
    head = text if idx == -1 else text[:idx]

    head = strip_endings(head)
    multiline = "\n" in head

    return attach_ending(_abrupt_cut(head), ending, multiline), ending
