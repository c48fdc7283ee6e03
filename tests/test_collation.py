"""
Unit tests for the title collator: Cyrillic order, case, accents and numbers.
"""

from movie_catalog.collation import TitleCollator

collator = TitleCollator()


def sort_titles(titles, descending=False):
	return collator.sort(titles, key=lambda t: t, descending=descending)


def test_ukrainian_letters_and_uppercase_first():
	titles = ["я-тест", "ґ-тест", "А-тест", "а-тест", "Я-тест", "Ґ-тест", "б-тест", "Б-тест"]
	assert sort_titles(titles) == ["А-тест", "а-тест", "Б-тест", "б-тест", "Ґ-тест", "ґ-тест", "Я-тест", "я-тест"]


def test_ghe_with_upturn_follows_ghe():
	assert collator.compare("Гора", "Ґава") < 0
	assert collator.compare("Ґава", "Дім") < 0


def test_case_insensitive_base_order_with_trimming():
	assert sort_titles(["  zebra", "Alpha", "beta"]) == ["Alpha", "beta", "  zebra"]


def test_accents_are_secondary():
	assert sort_titles(["Cafes", "Café", "Cafe"]) == ["Cafe", "Café", "Cafes"]


def test_numeric_aware():
	assert sort_titles(["Movie 10", "Movie 2", "Movie 1"]) == ["Movie 1", "Movie 2", "Movie 10"]


def test_descending_reverses_order():
	assert sort_titles(["а-тест", "Б-тест", "А-тест"], descending=True) == ["Б-тест", "а-тест", "А-тест"]


def test_sort_is_idempotent():
	titles = ["б", "Б", "а", "А", "Movie 10", "Movie 9", "  Ґ"]
	once = sort_titles(titles)
	assert sort_titles(once) == once


def test_space_and_punctuation_rank_before_digits():
	assert collator.compare("Apollo 13", "Apollo13") < 0
	assert sort_titles(["Oceans", "Ocean11", "Ocean-11", "Ocean 11"]) == ["Ocean 11", "Ocean-11", "Ocean11", "Oceans"]


def test_numbers_compare_across_the_whole_title():
	assert sort_titles(["Apollo13", "Apollo 13", "Apollo 2", "Apollo"]) == ["Apollo", "Apollo 2", "Apollo 13", "Apollo13"]
