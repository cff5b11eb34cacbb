# ---------------------------------
# Joke catalog (Setting ↔ Mishap line)
# ---------------------------------

# Core idea:
# 1) SETTING: a museum scenario, one or two roles, a tone of voice.
# 2) DELIVERY: the teller builds the bit up as if a punchline were coming.
# 3) MISHAP: instead of the punchline, the teller breaks off with one of the
#    six ENDINGS below. That line is the only admission of error in the joke.
#
# Everything here is loaded once at import time and never mutated.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from wrongway.generation.params import JokeRequest


ENDINGS: Tuple[str, ...] = (
    "Shit! I was telling it the wrong way...",
    "Hmm... wait, wait, that's not the way.",
    "Mmm... it wasn't like that, but it is very funny, I swear.",
    "No — no, that's not how it goes. Hold on.",
    "Wait. I'm messing it up. This is not how the joke goes.",
    "Hmm... maybe I have it backwards. Sorry, lost it.",
)

SCENARIOS: Tuple[str, ...] = (
    "Queue",
    "Desktop",
    "Entrance hall",
    "Gallery",
    "Bathroom",
    "Cloakroom",
    "Elevator",
    "Director's office",
    "Education Department",
    "Archive",
    "Library",
    "Auditorium",
    "Shop",
    "Storehouse",
)

ROLES: Tuple[str, ...] = (
    "Visitor",
    "Artist",
    "Curator",
    "Director",
    "Gallerist",
    "Technician",
    "Guide",
    "Critic",
    "Registrar",
    "Guard",
    "Cleaner",
    "Cloakroom attendant",
    "Ticket seller",
    "Dog",
)

LENGTHS: Tuple[str, ...] = ("short", "medium", "long")

DEFAULT_LENGTH = "medium"

ZIZEK_COUNTRIES: Tuple[str, ...] = (
    "Yugoslavia",
    "USSR",
    "Soviet Union",
    "Poland",
    "Czechoslovakia",
    "Romania",
    "Bulgaria",
    "Hungary",
    "East Germany",
    "Albania",
)


class Tone(str, Enum):
    DRY = "Dry"
    IRONIC = "Ironic"
    COCKY = "Cocky"
    SILLY = "Silly"
    ZIZEK = "Zizek"
    SARCASTIC = "Sarcastic"
    FAEMINO_CANSADO = "Faemino-Cansado"
    FLOWERY = "Flowery"
    CRINGE = "Cringe"
    FANTASTIC = "Fantastic"
    META = "Meta"
    CAMPY = "Campy"
    OVER_THE_TOP = "Over-the-top"

    @classmethod
    def lookup(cls, value: str) -> Optional["Tone"]:
        """Return the Tone for a raw string, or None for tones outside the set."""
        try:
            return cls(value)
        except ValueError:
            return None


TONES: Tuple[str, ...] = tuple(t.value for t in Tone)


# ----------------------------
# Tone-specific rules
# ----------------------------

@dataclass(frozen=True)
class ToneRule:
    """
    Extra behaviour for one tone.

    Attributes:
        addendum: Pure function building the constraint block appended to the prompt
        forced_ending: Catalog entry used regardless of what the generator picked
    """

    addendum: Callable[["JokeRequest"], str]
    forced_ending: Optional[str] = None


_STRICT_ENDING_USAGE = (
    '- ENDING USAGE (STRICT): the mishap line replaces any punchline; it appears ONLY ONCE, '
    'as the very last line. Avoid any apology or "wrong/not the way/sorry" before the last line.'
)


def _faemino_cansado_block(request: "JokeRequest") -> str:
    if len(request.roles) == 2:
        form = (
            '- Form: micro-dialogue prefixed by roles ("Artist:", "Curator:", etc.), '
            "quick back-and-forth."
        )
    else:
        form = '- Form: monologue with 1–2 very brief interjections by "Other:".'

    return f"""
TONE-SPECIFIC RULES — Faemino-Cansado (apply ONLY if TONE = "Faemino-Cansado"):
- Persona: confident pseudo-expert (Spanish "cuñado" energy) but polite and non-hostile; assertive, slightly cocky; never insulting.
- Cadence: deadpan minimalism; short clipped lines; optional "(pause)" or "..." as timing marks; rhythm is conversational, not theatrical.
- Register: use EXACTLY 2 light malapropisms (elevated-but-misused terms), e.g., "epistemic mop", "ontological tapas", "dialectical locker". Do not exceed 2.
- Mechanism: state a pompous "rule" or "definition" about art/museum/logistics, then apply it to a trivial detail so the logic gently collapses into absurdity. No classic punchline.
- Conversational flavor: sprinkle 1–2 mild castizo-style interjections in English ("phenomenal", "right, right", "listen", "indeed"); keep it subtle.
- Setting discipline: keep the scene strictly inside the given museum SCENARIO (labels, tickets, cloakroom tags, elevators, signage are fine). Do NOT mention bars, cafés, drinks, cigarettes, or bar props explicitly.
{form}
- Language: ENGLISH only; timeless (no topical politics).
{_STRICT_ENDING_USAGE}
""".strip()


def _zizek_block(request: "JokeRequest") -> str:
    countries = ", ".join(ZIZEK_COUNTRIES)
    return f"""
TONE-SPECIFIC RULES — Zizek (apply ONLY if TONE = "Zizek"):
- Persona: first-person lecture, digressive; include at least one "you know" and one "and so on".
- Opening: begin with EXACTLY ONE of the following phrasings (choose randomly) + a COUNTRY from this list [{countries}]:
    1) "I'm telling an old joke from <COUNTRY>."
    2) "There is this old joke they used to tell in <COUNTRY>."
    3) "I remember an old joke from <COUNTRY>."
    4) "In <COUNTRY>, there's this old joke."
    5) "An old joke circulates in <COUNTRY>."
- Content: add 1–2 short philosophical/political asides (e.g., Hegel, Kant, Lacan, Soviet posters, Gorbachev's birthmark).
- Form: 3–5 lines total; conference cadence (short sentences, digressions).
- Language: ENGLISH only.
- The last line is always: "{ENDINGS[0]}"
{_STRICT_ENDING_USAGE}
""".strip()


TONE_RULES: Mapping[Tone, ToneRule] = MappingProxyType({
    Tone.ZIZEK: ToneRule(addendum=_zizek_block, forced_ending=ENDINGS[0]),
    Tone.FAEMINO_CANSADO: ToneRule(addendum=_faemino_cansado_block),
})


def tone_rule(tone: str) -> Optional[ToneRule]:
    """Look up the ToneRule for a raw tone string (None if the tone has no extras)."""
    key = Tone.lookup(tone)
    if key is None:
        return None
    return TONE_RULES.get(key)
