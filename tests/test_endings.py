import random

import pytest

from wrongway.generation.catalog import ENDINGS
from wrongway.generation.endings import enforce_ending, select_ending, strip_endings


def assert_single_terminal_ending(joke, ending):
    assert ending in ENDINGS
    assert joke.endswith(ending)
    head = joke[: -len(ending)]
    for e in ENDINGS:
        assert e not in head


def test_mid_text_ending_removed():
    joke = (
        "A man waits... Hmm... wait, wait, that's not the way. He laughs. "
        "Shit! I was telling it the wrong way..."
    )
    fixed, ending = enforce_ending(joke, "Shit! I was telling it the wrong way...", "Dry")

    assert ending == "Shit! I was telling it the wrong way..."
    assert fixed == "A man waits... He laughs — Shit! I was telling it the wrong way..."
    assert_single_terminal_ending(fixed, ending)


def test_mislabelled_ending_found_in_tail():
    joke = "A man waits... He laughs — Wait. I'm messing it up. This is not how the joke goes."
    fixed, ending = enforce_ending(joke, "Oops", "Dry")
    assert ending == "Wait. I'm messing it up. This is not how the joke goes."
    assert fixed == joke


def test_missing_ending_appended_with_dash():
    rng = random.Random(3)
    expected = random.Random(3).choice(ENDINGS)

    fixed, ending = enforce_ending("The guard nods...and that's the joke.", "Oops", "Dry", rng)

    assert ending == expected
    assert fixed == f"The guard nods...and that's the joke — {expected}"


def test_multiline_uses_newline():
    joke = "Curator: The label is wrong side up.\nArtist: It is a statement!"
    fixed, ending = enforce_ending(joke, ENDINGS[4], "Ironic")
    assert fixed == f"Curator: The label is wrong side up.\nArtist: It is a statement\n{ENDINGS[4]}"


def test_zizek_forces_first_ending():
    joke = f"I'm telling an old joke from Poland, you know, and so on — {ENDINGS[1]}"
    fixed, ending = enforce_ending(joke, ENDINGS[1], "Zizek")

    assert ending == ENDINGS[0]
    assert fixed == f"I'm telling an old joke from Poland, you know, and so on — {ENDINGS[0]}"


def test_claimed_ending_is_trimmed():
    assert select_ending("x", f"  {ENDINGS[2]} ", "Dry") == ENDINGS[2]


def test_joke_that_is_only_an_ending():
    fixed, ending = enforce_ending(ENDINGS[3], ENDINGS[3], "Dry")
    assert fixed == ENDINGS[3]
    assert ending == ENDINGS[3]


def test_strip_endings_removes_all():
    text = f"{ENDINGS[0]} one {ENDINGS[5]} two {ENDINGS[0]}"
    assert strip_endings(text) == " one two"


@pytest.mark.parametrize("seed", range(25))
def test_invariant_holds_for_arbitrary_output(seed):
    rng = random.Random(seed)
    pieces = ["The visitor", "waits.", "\n", "Guard:", "Really?", "—", "...", " "] + list(ENDINGS)
    joke = " ".join(rng.choice(pieces) for _ in range(rng.randint(1, 12))) + " tail"
    claimed = rng.choice(list(ENDINGS) + ["Oops", ""])
    tone = rng.choice(["Dry", "Zizek", "Faemino-Cansado", "Meta"])

    fixed, ending = enforce_ending(joke, claimed, tone, rng)

    assert_single_terminal_ending(fixed, ending)
    if tone == "Zizek":
        assert ending == ENDINGS[0]
