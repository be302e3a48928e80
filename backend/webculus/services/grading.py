"""Answer checking for multiple-choice practice problems.

Choices are short math expressions (``x = 3``, ``(2, -1)``, ``y ≥ 2x + 1``).
The submitted choice matches the key when both are equal after
normalisation: case folding, unified minus signs, and whitespace removal.
"""

import re

_WHITESPACE = re.compile(r"\s+")
# ASCII hyphen plus the unicode minus / dashes editors like to insert
_MINUS_SIGNS = str.maketrans({"−": "-", "–": "-", "—": "-"})


def _normalise(text: str) -> str:
    """'  X = −3 ' → 'x=-3'"""
    t = text.translate(_MINUS_SIGNS).casefold()
    return _WHITESPACE.sub("", t)


def is_correct_answer(user_answer: str, correct_answer: str) -> bool:
    """True when *user_answer* selects the same choice as *correct_answer*."""
    if user_answer == correct_answer:
        return True
    return _normalise(user_answer) == _normalise(correct_answer)
