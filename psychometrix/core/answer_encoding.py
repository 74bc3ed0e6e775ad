"""Conversion of option indices to the letter codes the assessment backend expects."""

from __future__ import annotations

from collections.abc import Mapping
import logging

from psychometrix.constants.quiz_constants import OPTION_LETTERS

logger = logging.getLogger(__name__)

_DEFAULT_LETTER = OPTION_LETTERS[0]


def option_letter(option_index: int) -> str:
    """Map 0..3 to 'A'..'D'. Any other index maps to 'A'."""
    if 0 <= option_index < len(OPTION_LETTERS):
        return OPTION_LETTERS[option_index]
    logger.warning("Option index %s has no letter code; sending %r", option_index, _DEFAULT_LETTER)
    return _DEFAULT_LETTER


def encode_answers(answers: Mapping[int, int]) -> list[str]:
    """Return letter codes ordered by question id."""
    return [option_letter(answers[question_id]) for question_id in sorted(answers)]
