"""Loading of the static question sequences from human-friendly text files.

File format (repeat blocks separated by blank lines or '---'):

    HEADING: Optional short title shown above the media
    IMAGE: Optional media reference (URL)
    Q: Prompt text (supports markdown). Additional lines until the next
       marker are treated as part of the prompt.
    A: First option text
    INSIGHT A: Optional report text shown when option A is chosen
    B: Second option text
    C: Third option text (optional)
    D: Fourth option text (optional)

Example:

    IMAGE: https://example.org/duck-rabbit.webp
    Q: What do you notice first in this image?
    A: The Rabbit
    INSIGHT A: Those who see the rabbit first are deep thinkers.
    B: The Duck
    INSIGHT B: Those who saw the duck are more emotionally impulsive.

Question ids are assigned from the block order, starting at 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from psychometrix.constants.quiz_constants import (
    MIN_OPTION_COUNT,
    OPTION_LETTERS,
    PERCEPTION_BANK_FILE,
    SCENARIO_BANK_FILE,
)
from psychometrix.core.errors import QuestionBankError
from psychometrix.core.models import QuestionDefinition

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(slots=True)
class QuestionBank:
    """Ordered, read-only question sequence loaded from a file."""

    source_path: Path | None
    questions: tuple[QuestionDefinition, ...]

    def __len__(self) -> int:
        return len(self.questions)

    def get(self, question_id: int) -> QuestionDefinition:
        if not 1 <= question_id <= len(self.questions):
            raise IndexError(f"Question id {question_id} out of range")
        return self.questions[question_id - 1]


def load_question_bank(file_path: Path) -> QuestionBank:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_question_bank(text)
    if not questions:
        raise QuestionBankError(f"{file_path.name} did not contain any questions.")
    return QuestionBank(source_path=file_path, questions=tuple(questions))


def load_default_banks() -> tuple[QuestionBank, QuestionBank]:
    """Return the bundled (scenario, perception) banks."""
    return (
        load_question_bank(_DATA_DIR / SCENARIO_BANK_FILE),
        load_question_bank(_DATA_DIR / PERCEPTION_BANK_FILE),
    )


def parse_question_bank(text: str) -> list[QuestionDefinition]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [
        _parse_block(block, question_id)
        for question_id, block in enumerate((b for b in blocks if b), start=1)
    ]


def _parse_block(block: str, question_id: int) -> QuestionDefinition:
    prompt_lines: list[str] = []
    options: dict[str, str] = {}
    insights: dict[str, str] = {}
    heading: str | None = None
    media_url: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            prompt_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("HEADING:"):
            heading = line.split(":", 1)[1].strip() or None
            current_section = None
            continue

        if upper.startswith("IMAGE:"):
            media_url = line.split(":", 1)[1].strip() or None
            current_section = None
            continue

        if upper.startswith("INSIGHT "):
            marker, _, insight_text = line.partition(":")
            letter = marker[len("INSIGHT "):].strip().upper()
            if letter not in OPTION_LETTERS:
                raise QuestionBankError(f"INSIGHT must name an option letter: '{line}'.")
            insights[letter] = insight_text.strip()
            current_section = f"INSIGHT {letter}"
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            prompt_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        elif current_section is not None and current_section.startswith("INSIGHT "):
            letter = current_section[-1]
            insights[letter] = f"{insights[letter]} {line}".strip()
        else:
            raise QuestionBankError(
                f"Encountered text outside of a known section: '{line}'."
            )

    prompt = "\n".join(prompt_lines).strip()
    if not prompt:
        raise QuestionBankError("Question prompt missing (Q: ...)")

    letters = OPTION_LETTERS[: len(options)]
    if len(options) < MIN_OPTION_COUNT or set(options) != set(letters):
        raise QuestionBankError(
            "Each question must define between two and four options, starting at A."
        )
    option_list = tuple(options[letter].strip() for letter in letters)
    if any(not option for option in option_list):
        raise QuestionBankError("Option text cannot be empty.")
    unknown_insights = set(insights) - set(letters)
    if unknown_insights:
        raise QuestionBankError(
            f"INSIGHT given for missing option(s): {', '.join(sorted(unknown_insights))}."
        )

    insight_list: tuple[str, ...] = ()
    if insights:
        insight_list = tuple(insights.get(letter, "") for letter in letters)

    return QuestionDefinition(
        id=question_id,
        prompt=prompt,
        options=option_list,
        media_url=media_url,
        heading=heading,
        insights=insight_list,
    )
