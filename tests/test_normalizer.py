"""
Unit tests for the normalizer: case folding, actor keys and LIKE patterns.
"""

from movie_catalog.normalizer import actor_key, actor_set, like_pattern, normalize


def test_normalize_folds_latin_and_cyrillic():
	assert normalize("The MATRIX") == "the matrix"
	assert normalize("ҐЄІЇ Тест") == "ґєії тест"
	assert normalize("Іван Петренко") == "іван петренко"


def test_normalize_does_not_trim_and_is_total():
	assert normalize("  Speed ") == "  speed "
	assert normalize("") == ""
	assert normalize(None) == ""


def test_actor_key_trims_and_lowercases():
	assert actor_key("  Marta ") == "marta"
	assert actor_key(" іван петренко") == actor_key("Іван Петренко")


def test_actor_set_ignores_order_case_and_repeats():
	first = actor_set(["Іван Петренко", "Marta"])
	second = actor_set([" marta ", "іван петренко", "MARTA"])
	assert first == second
	assert len(second) == 2


def test_like_pattern_escapes_wildcards():
	assert like_pattern(" Matrix ") == "%matrix%"
	assert like_pattern("100%") == "%100\\%%"
	assert like_pattern("a_b") == "%a\\_b%"
