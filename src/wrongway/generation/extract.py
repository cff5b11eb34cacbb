"""
Recover the JSON object substring from free-form model output.

This is a best-effort heuristic; validate_contract is the real safety net.
"""

import re

_FENCE_RE = re.compile(r"^```[a-zA-Z]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


def extract_json(text: str) -> str:
    """
    Strip code fences and surrounding prose around a single JSON object.

    1. A ```json ... ``` (or bare ```) fence is replaced by its content.
    2. If what remains is not already {...}, slice from the first "{" to the
       last "}".
    3. With no usable delimiters the input is returned unchanged.

    Never raises.
    """
    if not text:
        return text

    s = text.strip()

    if s.startswith("```"):
        m = _FENCE_RE.match(s)
        if m:
            s = m.group(1).strip()

    if s.startswith("{") and s.endswith("}"):
        return s

    first = s.find("{")
    last = s.rfind("}")
    if first != -1 and last > first:
        return s[first:last + 1]

    return text
