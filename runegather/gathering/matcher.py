# runegather/gathering/matcher.py
from typing import Sequence


def matches(required: Sequence[str], selected: Sequence[str]) -> bool:
    """
    True when `selected` holds exactly the elements of `required`, in any order.

    Both sides are compared as multisets: an element required twice must be
    selected twice. Ids are compared as strings.
    """
    if len(required) != len(selected):
        return False
    return sorted(str(el) for el in required) == sorted(str(el) for el in selected)
