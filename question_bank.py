from __future__ import annotations
from dataclasses import dataclass

from models import Alternative, Question


@dataclass(frozen=True)
class BankQuestion:
    prompt: str
    options: tuple[str, ...]
    correct_index: int

    def to_question(self, question_id: str) -> Question:
        # option index doubles as alternative id and display order
        return Question(
            id=question_id,
            statement=self.prompt,
            alternatives=tuple(
                Alternative(
                    id=str(index),
                    text=text,
                    is_correct=index == self.correct_index,
                    order=index,
                )
                for index, text in enumerate(self.options)
            ),
        )


STATIC_BANK: tuple[BankQuestion, ...] = (
    BankQuestion(
        "What is the chemical symbol for water?",
        ("H2O", "CO2", "O2", "NaCl"),
        0,
    ),
    BankQuestion(
        "Which planet is known as the Red Planet?",
        ("Venus", "Jupiter", "Mars", "Saturn"),
        2,
    ),
    BankQuestion(
        "How many sides does a hexagon have?",
        ("Five", "Six", "Seven", "Eight"),
        1,
    ),
    BankQuestion(
        "What is the largest ocean on Earth?",
        ("Atlantic", "Indian", "Arctic", "Pacific"),
        3,
    ),
    BankQuestion(
        "Which gas do plants absorb during photosynthesis?",
        ("Oxygen", "Carbon dioxide", "Nitrogen", "Helium"),
        1,
    ),
    BankQuestion(
        "What is 12 multiplied by 8?",
        ("96", "86", "108", "92"),
        0,
    ),
    BankQuestion(
        "Who wrote 'Romeo and Juliet'?",
        ("Charles Dickens", "Jane Austen", "William Shakespeare", "Mark Twain"),
        2,
    ),
    BankQuestion(
        "What is the boiling point of water at sea level in degrees Celsius?",
        ("90", "100", "110", "120"),
        1,
    ),
    BankQuestion(
        "Which organ pumps blood through the human body?",
        ("Lungs", "Liver", "Kidneys", "Heart"),
        3,
    ),
    BankQuestion(
        "What is the square root of 81?",
        ("7", "8", "9", "10"),
        2,
    ),
)


def load_static_questions(
    bank: tuple[BankQuestion, ...] = STATIC_BANK,
) -> list[Question]:
    """Build the fixed question set; ids are 1-based positions in the bank."""
    return [
        entry.to_question(str(index))
        for index, entry in enumerate(bank, start=1)
    ]
