"""Structural pattern checks applied to candidate identifiers.

Both checks are pure and linear in the length of the input. They accept
any string, not only the fixed-width segments the format validator feeds
them.
"""


def has_adjacent_repetition(value: str) -> bool:
    """True if any character is immediately followed by the same character.

    Strings shorter than two characters have no adjacent pair and return False.
    """
    for i in range(len(value) - 1):
        if value[i] == value[i + 1]:
            return True
    return False


def is_strict_sequence(value: str) -> bool:
    """True if every character's code point is exactly one above the previous.

    A string of length 0 or 1 counts as a strict sequence. The check is not
    limited to letters or digits: ``"9:"`` and ``"Z["`` are sequences too.
    """
    if len(value) <= 1:
        return True
    for i in range(len(value) - 1):
        if ord(value[i + 1]) - ord(value[i]) != 1:
            return False
    return True
