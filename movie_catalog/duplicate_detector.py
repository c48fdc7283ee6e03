"""
Duplicate detection.
Two movies are duplicates when the trimmed title, the year and the trimmed
format match exactly and their actor sets are equal after trim + lowercase,
regardless of order or repeated names.
"""

# Ordered grouping of records by their lookup key
from collections import OrderedDict  # group records by key, keeping first-seen order
# Dataclass for the bulk filter result
from dataclasses import dataclass  # simple result record
# Typing hints for clarity of public API
from typing import Dict, Iterable, List, Sequence, Tuple  # type hints

# SQLAlchemy query building and session types
from sqlalchemy import select  # SELECT statements
from sqlalchemy.orm import Session, selectinload, sessionmaker  # sessions and eager loading

# Console logging
from loguru import logger  # console logger

# Our ORM model, input record and actor-set helper
from .database import Movie  # movie table
from .models import MovieRecord  # validated input record
from .normalizer import actor_set  # normalized actor set

MovieKey = Tuple[str, int, str]


@dataclass
class FilterResult:
	kept: List[MovieRecord]  # records with no stored duplicate, input order
	skipped: int  # records dropped as duplicates


def load_movies_by_key(session: Session, title: str, year: int, format: str) -> List[Movie]:
	"""All stored movies with exactly this (title, year, format), actors loaded."""
	# Exact match on the trimmed title and format; actors come in a second SELECT
	stmt = (
		select(Movie)
		.options(selectinload(Movie.actors))
		.where(Movie.title == title.strip(), Movie.year == year, Movie.format == format.strip())
		.order_by(Movie.id)
	)
	return list(session.scalars(stmt))


def has_matching_actor_set(existing: Iterable[Movie], actor_names: Iterable[str]) -> bool:
	"""True if any of `existing` carries the same normalized actor set as `actor_names`."""
	wanted = actor_set(actor_names)
	# Stop at the first stored movie whose cast matches
	for movie in existing:
		if actor_set(a.name for a in movie.actors) == wanted:
			return True
	return False


class DuplicateDetector:
	"""Looks up stored movies to decide whether candidates already exist."""

	def __init__(self, session_factory: sessionmaker):
		# Each check opens its own short read-only session
		self.session_factory = session_factory

	def check_duplicate(self, title: str, year: int, format: str, actor_names: Sequence[str]) -> bool:
		"""Single-create check: one lookup for the candidate's key."""
		with self.session_factory() as session:
			existing = load_movies_by_key(session, title, year, format)
			duplicate = has_matching_actor_set(existing, actor_names)
		if duplicate:
			logger.debug(f"[Duplicates] '{title.strip()}' ({year}, {format}) matches a stored movie")
		return duplicate

	def filter_duplicates(self, records: Sequence[MovieRecord]) -> FilterResult:
		"""
		Bulk check: one storage lookup per distinct (title, year, format) key,
		then a per-record actor-set comparison against that key's rows.
		Records are compared with stored movies only, never with each other.
		"""
		if not records:
			return FilterResult(kept=[], skipped=0)

		# 1) Group records by key so each key is queried once
		grouped: "OrderedDict[MovieKey, List[MovieRecord]]" = OrderedDict()
		for record in records:
			grouped.setdefault(record.key(), []).append(record)

		existing_by_key: Dict[MovieKey, List[Movie]] = {}
		with self.session_factory() as session:
			# 2) Fetch the stored movies for every key that has any
			for key in grouped:
				existing = load_movies_by_key(session, *key)
				if existing:
					existing_by_key[key] = existing

			# 3) Keep the records whose cast matches none of their key's movies
			kept = [
				record for record in records
				if not has_matching_actor_set(existing_by_key.get(record.key(), []), record.actors)
			]

		skipped = len(records) - len(kept)
		logger.info(f"[Duplicates] Checked {len(records)} records over {len(grouped)} keys | kept={len(kept)} | skipped={skipped}")
		return FilterResult(kept=kept, skipped=skipped)
