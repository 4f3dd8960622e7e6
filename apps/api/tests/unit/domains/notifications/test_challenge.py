"""
Tests for the arithmetic dismissal challenge.
"""

import random

import pytest

from src.domains.notifications.challenge import MathChallenge


class TestMathChallenge:
    def test_question_and_answer(self):
        challenge = MathChallenge(12, "+", 30)

        assert challenge.question == "12 + 30"
        assert challenge.answer == 42

    def test_subtraction(self):
        assert MathChallenge(50, "-", 8).answer == 42

    @pytest.mark.parametrize("seed", range(50))
    def test_generated_challenges_stay_in_range(self, seed):
        challenge = MathChallenge.generate(random.Random(seed))

        if challenge.operator == "+":
            assert 1 <= challenge.left <= 50
            assert 1 <= challenge.right <= 50
        else:
            assert 20 <= challenge.left <= 69
            assert challenge.answer >= 0

    def test_parse_round_trips_question(self):
        challenge = MathChallenge.generate(random.Random(7))

        assert MathChallenge.parse(challenge.question) == challenge

    @pytest.mark.parametrize("question", ["", "2 * 3", "abc", "1 +", None])
    def test_parse_rejects_other_text(self, question):
        with pytest.raises(ValueError):
            MathChallenge.parse(question)

    @pytest.mark.parametrize(
        "answer,expected",
        [("42", True), (42, True), (" 42 ", True), ("41", False), ("forty", False)],
    )
    def test_verify(self, answer, expected):
        assert MathChallenge(40, "+", 2).verify(answer) is expected

    def test_verify_none_is_wrong(self):
        assert MathChallenge(40, "+", 2).verify(None) is False
