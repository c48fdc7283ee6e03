"""
Locale-aware title ordering.
SQLite compares strings byte by byte, which misplaces letters such as the
Ukrainian Ґ, Є, І and Ї and interleaves upper and lower case. Titles are
therefore ordered in memory with Unicode Collation Algorithm weights.
"""

import re  # split titles into digit and text runs
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from pyuca import Collator  # DUCET-based Unicode collation

T = TypeVar("T")

_CHUNK_RE = re.compile(r"\d+|\D+")


def _levels(key: Sequence[int]) -> List[List[int]]:
	"""Split a pyuca sort key into its levels; 0 separates one level from the next."""
	levels: List[List[int]] = [[]]
	for weight in key:
		if weight == 0:
			levels.append([])
		else:
			levels[-1].append(weight)
	return levels


class TitleCollator:
	"""
	Orders titles by, in turn:
	1. base letters across the whole title, with each digit run weighted as a
	   single number ("Movie 2" < "Movie 10") that ranks after spaces and
	   punctuation but before letters ("Apollo 13" < "Apollo13" < "Apollos"),
	2. accents and other secondary differences,
	3. case, uppercase first,
	4. leading zeros ("7" < "07"), then the raw title, so the order is total.
	Surrounding whitespace is ignored.
	"""

	def __init__(self, collator: Optional[Collator] = None):
		self._collator = collator or Collator()  # loads the default allkeys table once

		# Weights every digit run borrows from "0": its primary sits between
		# variable characters and letters, its secondary is the common one
		zero = _levels(self._collator.sort_key("0"))
		self._digit_primary = zero[0][0]
		self._digit_secondary = zero[1][0]

	def sort_key(self, title: str) -> Tuple:
		text = (title or "").strip()
		primary: List[Tuple[int, int]] = []  # (weight, numeric value) pairs
		secondary: List[int] = []
		digit_widths: List[int] = []

		for chunk in _CHUNK_RE.findall(text):
			if chunk.isdigit():
				# One element per number, compared by value after the digit weight
				primary.append((self._digit_primary, int(chunk)))
				secondary.append(self._digit_secondary)
				digit_widths.append(len(chunk))
				continue
			levels = _levels(self._collator.sort_key(chunk.lower()))
			primary.extend((weight, 0) for weight in levels[0])
			if len(levels) > 1:
				secondary.extend(levels[1])

		case = tuple(0 if ch.isupper() else 1 for ch in text)
		return (tuple(primary), tuple(secondary), case, tuple(digit_widths), text)

	def sort(self, items: Sequence[T], key: Callable[[T], str], descending: bool = False) -> List[T]:
		"""Return a new list of `items` ordered by the title `key` extracts."""
		return sorted(items, key=lambda item: self.sort_key(key(item)), reverse=descending)

	def compare(self, a: str, b: str) -> int:
		ka, kb = self.sort_key(a), self.sort_key(b)
		return (ka > kb) - (ka < kb)
