import random
import re
from dataclasses import dataclass
from typing import Optional, Union

_QUESTION = re.compile(r"^\s*(\d+)\s*([+-])\s*(\d+)\s*$")


@dataclass(frozen=True)
class MathChallenge:
    """Small arithmetic question gating the dismissal of critical alerts."""

    left: int
    operator: str
    right: int

    @property
    def question(self) -> str:
        return f"{self.left} {self.operator} {self.right}"

    @property
    def answer(self) -> int:
        if self.operator == "+":
            return self.left + self.right
        return self.left - self.right

    @classmethod
    def generate(cls, rng: Optional[random.Random] = None) -> "MathChallenge":
        rng = rng or random.Random()
        if rng.choice("+-") == "+":
            return cls(rng.randint(1, 50), "+", rng.randint(1, 50))
        left = rng.randint(20, 69)
        # Subtraction never goes below zero
        return cls(left, "-", rng.randint(1, left))

    @classmethod
    def parse(cls, question: str) -> "MathChallenge":
        match = _QUESTION.match(question or "")
        if not match:
            raise ValueError(f"Not a challenge question: {question!r}")
        return cls(int(match.group(1)), match.group(2), int(match.group(3)))

    def verify(self, answer: Union[str, int, None]) -> bool:
        try:
            return int(str(answer).strip()) == self.answer
        except ValueError:
            return False
