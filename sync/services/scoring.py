"""Grading for test mode answers.

Points depend on how many clues were revealed and how far the typed answer is
from the expected one:

    clues | correct | 1 mistake | 2 mistakes | 3+
    ------+---------+-----------+------------+---
      0   |    3    |     2     |     1      | 0
      1   |    2    |     1     |     0      | 0
      2   |    1    |     0     |     0      | 0

Each (mistakes, clues) cell also maps to a letter, A (right first time)
through L (wrong with two clues).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Sequence

AnswerGrade = Literal["correct", "half-correct", "incorrect"]

MAX_CLUE_LEVEL = 2
POINTS_PER_WORD = 3

_PUNCTUATION_RE = re.compile(r"[!?.,'\"¡¿]")

SCORE_LETTERS = "ABCDEFGHIJKL"
SCORE_LETTER_DESCRIPTIONS = {
    "A": "Right first time",
    "B": "Right with 1 clue",
    "C": "Right with 2 clues",
    "D": "1 mistake, no clues",
    "E": "1 mistake, 1 clue",
    "F": "1 mistake, 2 clues",
    "G": "2 mistakes, no clues",
    "H": "2 mistakes, 1 clue",
    "I": "2 mistakes, 2 clues",
    "J": "Wrong, no clues",
    "K": "Wrong, 1 clue",
    "L": "Wrong, 2 clues",
}


def levenshtein_distance(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], current[j - 1], previous[j]))
        previous = current
    return previous[-1]


def normalize_answer(answer: str) -> str:
    return _PUNCTUATION_RE.sub("", answer.lower()).strip()


def mistake_count(user_answer: str, correct_answer: str) -> int:
    user, correct = normalize_answer(user_answer), normalize_answer(correct_answer)
    if user == correct:
        return 0
    return levenshtein_distance(user, correct)


def is_exact_match(user_answer: str, valid_answers: Sequence[str]) -> bool:
    normalized = normalize_answer(user_answer)
    return any(normalize_answer(answer) == normalized for answer in valid_answers)


def best_match(user_answer: str, valid_answers: Sequence[str]) -> tuple[str, int]:
    """Return the valid answer closest to ``user_answer`` and its mistake count; ties keep the first."""
    if not valid_answers:
        raise ValueError("at least one valid answer is required")
    best = valid_answers[0]
    lowest = mistake_count(user_answer, best)
    for answer in valid_answers[1:]:
        count = mistake_count(user_answer, answer)
        if count < lowest:
            best, lowest = answer, count
    return best, lowest


def answer_grade(mistakes: int) -> AnswerGrade:
    if mistakes == 0:
        return "correct"
    if mistakes <= 2:
        return "half-correct"
    return "incorrect"


def _check_clue_level(clue_level: int) -> int:
    if not 0 <= clue_level <= MAX_CLUE_LEVEL:
        raise ValueError(f"clue level must be between 0 and {MAX_CLUE_LEVEL}, got {clue_level}")
    return clue_level


def max_points(clue_level: int) -> int:
    return POINTS_PER_WORD - _check_clue_level(clue_level)


def calculate_points(clue_level: int, mistakes: int) -> int:
    available = max_points(clue_level)
    return max(0, available - min(mistakes, available))


def score_letter(clue_level: int, mistakes: int) -> str:
    row = min(mistakes, 3)
    return SCORE_LETTERS[row * 3 + _check_clue_level(clue_level)]


def score_percent(points_earned: int, points_possible: int) -> int:
    if points_possible == 0:
        return 0
    # round half up, not Python's banker's rounding
    return int(points_earned * 100 / points_possible + 0.5)


@dataclass
class WordTestResult:
    word_id: str
    user_answer: str
    correct_answer: str
    clue_level: int
    mistake_count: int
    points_earned: int
    max_points: int
    score_letter: str
    grade: AnswerGrade

    @property
    def is_correct(self) -> bool:
        return self.mistake_count == 0


def grade_word(word_id: str, user_answer: str, valid_answers: Sequence[str], clue_level: int) -> WordTestResult:
    correct_answer, mistakes = best_match(user_answer, valid_answers)
    return WordTestResult(
        word_id=word_id,
        user_answer=user_answer,
        correct_answer=correct_answer,
        clue_level=clue_level,
        mistake_count=mistakes,
        points_earned=calculate_points(clue_level, mistakes),
        max_points=max_points(clue_level),
        score_letter=score_letter(clue_level, mistakes),
        grade=answer_grade(mistakes),
    )


def restored_result(word_id: str, is_correct: bool) -> WordTestResult:
    """Stand-in for an answer given before a reload, when only is_correct was kept."""
    mistakes = 0 if is_correct else 3
    return WordTestResult(
        word_id=word_id,
        user_answer="",
        correct_answer="",
        clue_level=0,
        mistake_count=mistakes,
        points_earned=0,
        max_points=POINTS_PER_WORD,
        score_letter=score_letter(0, mistakes),
        grade=answer_grade(mistakes),
    )
