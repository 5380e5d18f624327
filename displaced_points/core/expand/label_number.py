from __future__ import annotations


NO_NUMBER = -1

# Longer digit runs saturate here instead of growing without bound.
MAX_LABEL_NUMBER = 2**63 - 1

_DIGITS = "0123456789"


def extract_label_number(label: str) -> int:
    """Return the integer formed by all digits of ``label``, read left to right.

    Non-digit characters (signs and decimal points included) are skipped, so
    ``"P-01.5"`` gives 15. Returns ``NO_NUMBER`` when the label has no digits.
    """
    digits = "".join(ch for ch in label if ch in _DIGITS)
    if not digits:
        return NO_NUMBER

    value = 0
    for ch in digits:
        value = value * 10 + (ord(ch) - ord("0"))
        if value >= MAX_LABEL_NUMBER:
            return MAX_LABEL_NUMBER
    return value
