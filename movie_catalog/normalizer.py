"""
Text normalization helpers.
Produces the lowercase comparison keys stored in `search_title`/`search_name`
and the LIKE patterns matched against them, so case-insensitive search never
depends on the database collation.
"""

from typing import FrozenSet, Iterable, Optional

LIKE_ESCAPE = "\\"


def normalize(text: Optional[str]) -> str:
	"""
	Lowercase `text` with Unicode case mapping (Cyrillic included).
	Whitespace is left alone; callers trim where they need to.
	"""
	if not text:  # None or empty
		return ""
	return text.lower()


def actor_key(name: str) -> str:
	"""Comparison key of one actor name inside a duplicate set."""
	return normalize(name.strip())


def actor_set(names: Iterable[str]) -> FrozenSet[str]:
	"""Order- and repeat-insensitive set of actor keys."""
	return frozenset(actor_key(n) for n in (names or []))


def like_pattern(term: str) -> str:
	"""Build a `%term%` pattern for `LIKE ... ESCAPE '\\'` against a normalized column."""
	value = normalize(term.strip())
	for ch in (LIKE_ESCAPE, "%", "_"):  # escape character first
		value = value.replace(ch, LIKE_ESCAPE + ch)
	return f"%{value}%"
