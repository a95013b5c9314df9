"""Composite PAN format rule.

A PAN is valid when it matches the mask ``AAAAA9999A`` (five letters, four
digits, one letter, all ASCII upper-case) and it is free of two
anti-patterns:

- no character is repeated in the adjacent position anywhere in the string
- neither the letter prefix nor the digit block is a straight run
  (``ABCDE``, ``1234``)
"""
import string
from typing import List

from pancheck.validation.patterns import has_adjacent_repetition, is_strict_sequence

PAN_LENGTH = 10

LETTERS = frozenset(string.ascii_uppercase)
DIGITS = frozenset(string.digits)

# (start, length) of each mask segment
PREFIX = (0, 5)
DIGIT_BLOCK = (5, 4)
SUFFIX = (9, 1)

# Rule names, in evaluation order
RULE_LENGTH = "length"
RULE_LETTERS_PREFIX = "letters_prefix"
RULE_DIGITS_MIDDLE = "digits_middle"
RULE_LETTER_SUFFIX = "letter_suffix"
RULE_ADJACENT_REPETITION = "adjacent_repetition"
RULE_SEQUENTIAL_LETTERS = "sequential_letters"
RULE_SEQUENTIAL_DIGITS = "sequential_digits"

RULES = (
    RULE_LENGTH,
    RULE_LETTERS_PREFIX,
    RULE_DIGITS_MIDDLE,
    RULE_LETTER_SUFFIX,
    RULE_ADJACENT_REPETITION,
    RULE_SEQUENTIAL_LETTERS,
    RULE_SEQUENTIAL_DIGITS,
)


def _segment(value: str, bounds) -> str:
    start, length = bounds
    return value[start:start + length]


def _all_in(segment: str, allowed) -> bool:
    return all(ch in allowed for ch in segment)


def format_violations(value: str) -> List[str]:
    """
    Return the names of the rules ``value`` breaks, in rule order.

    Segment rules depend on fixed offsets, so when the length is wrong only
    ``length`` is reported.
    """
    if len(value) != PAN_LENGTH:
        return [RULE_LENGTH]

    prefix = _segment(value, PREFIX)
    digit_block = _segment(value, DIGIT_BLOCK)
    suffix = _segment(value, SUFFIX)

    failed = []
    if not _all_in(prefix, LETTERS):
        failed.append(RULE_LETTERS_PREFIX)
    if not _all_in(digit_block, DIGITS):
        failed.append(RULE_DIGITS_MIDDLE)
    if not _all_in(suffix, LETTERS):
        failed.append(RULE_LETTER_SUFFIX)
    # across the full string, not per segment
    if has_adjacent_repetition(value):
        failed.append(RULE_ADJACENT_REPETITION)
    if is_strict_sequence(prefix):
        failed.append(RULE_SEQUENTIAL_LETTERS)
    if is_strict_sequence(digit_block):
        failed.append(RULE_SEQUENTIAL_DIGITS)
    return failed


def is_valid_format(value: str) -> bool:
    """True if ``value`` passes every PAN rule."""
    if len(value) != PAN_LENGTH:
        return False
    return not format_violations(value)
