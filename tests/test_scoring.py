import pytest

from sync.services import scoring


@pytest.mark.parametrize(
    "a, b, expected",
    [("", "", 0), ("abc", "", 3), ("kitten", "sitting", 3), ("gato", "gatto", 1), ("perro", "perro", 0)],
)
def test_levenshtein_distance(a, b, expected):
    assert scoring.levenshtein_distance(a, b) == expected


def test_normalize_strips_case_and_punctuation():
    assert scoring.normalize_answer("  ¿Qué tal?  ") == "qué tal"
    assert scoring.normalize_answer('"L\'eau."') == "leau"


def test_mistake_count_ignores_punctuation():
    assert scoring.mistake_count("¡Hola!", "hola") == 0
    assert scoring.mistake_count("hla", "hola") == 1


def test_best_match_picks_closest_answer():
    assert scoring.best_match("la gat", ["el gato", "la gata"]) == ("la gata", 1)
    assert scoring.is_exact_match("EL GATO", ["el gato", "la gata"]) is True
    assert scoring.is_exact_match("gato", ["el gato"]) is False
    with pytest.raises(ValueError):
        scoring.best_match("x", [])


@pytest.mark.parametrize(
    "clue, mistakes, points, letter",
    [
        (0, 0, 3, "A"),
        (1, 0, 2, "B"),
        (2, 0, 1, "C"),
        (0, 1, 2, "D"),
        (1, 1, 1, "E"),
        (2, 1, 0, "F"),
        (0, 2, 1, "G"),
        (1, 2, 0, "H"),
        (0, 5, 0, "J"),
        (2, 7, 0, "L"),
    ],
)
def test_points_and_letters(clue, mistakes, points, letter):
    assert scoring.calculate_points(clue, mistakes) == points
    assert scoring.score_letter(clue, mistakes) == letter


def test_answer_grades():
    assert scoring.answer_grade(0) == "correct"
    assert scoring.answer_grade(2) == "half-correct"
    assert scoring.answer_grade(3) == "incorrect"


def test_invalid_clue_level():
    with pytest.raises(ValueError):
        scoring.max_points(3)


def test_score_percent_rounds_half_up():
    assert scoring.score_percent(0, 0) == 0
    assert scoring.score_percent(1, 8) == 13
    assert scoring.score_percent(4, 12) == 33


def test_grade_word():
    result = scoring.grade_word("w1", "casa", ["la casa", "casa"], clue_level=1)
    assert result.correct_answer == "casa"
    assert result.is_correct
    assert result.points_earned == 2
    assert result.max_points == 2
    assert result.score_letter == "B"
    assert result.grade == "correct"


def test_every_letter_has_a_description():
    assert set(scoring.SCORE_LETTER_DESCRIPTIONS) == set(scoring.SCORE_LETTERS)
    assert scoring.SCORE_LETTER_DESCRIPTIONS[scoring.score_letter(1, 2)] == "2 mistakes, 1 clue"


def test_restored_result_keeps_only_correctness():
    right = scoring.restored_result("w1", True)
    wrong = scoring.restored_result("w2", False)

    assert right.is_correct and right.points_earned == 0
    assert not wrong.is_correct
    assert wrong.mistake_count == 3
    assert wrong.max_points == scoring.POINTS_PER_WORD
    assert wrong.grade == "incorrect"
