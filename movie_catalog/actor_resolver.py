"""
Actor resolution.
Maps actor-name strings to persisted Actor rows inside the caller's session,
creating the missing ones in a single batch.
"""

# Typing hints for the public API
from typing import Dict, Iterable, List  # type hints

# SQLAlchemy query building and the session type
from sqlalchemy import select  # SELECT statements
from sqlalchemy.orm import Session  # caller-owned unit of work

# Console logging
from loguru import logger  # console logger

# Our ORM model and the search-key helper
from .database import Actor  # actor table
from .normalizer import normalize  # lowercase search key

# Keeps each IN (...) lookup well below SQLite's bound-parameter ceiling
LOOKUP_CHUNK_SIZE = 500


class ActorResolver:
	"""
	Resolves names by exact match on the trimmed name. "John" and "JOHN" are two
	different actors here even though duplicate detection treats them as equal.
	"""

	def __init__(self, session: Session):
		# Work inside the caller's transaction so new actors commit or roll back with it
		self.session = session

	def resolve_by_names(self, names: Iterable[str]) -> Dict[str, Actor]:
		"""Return `{trimmed name: Actor}` for every distinct non-empty name in `names`."""
		# Trim, drop empties and de-duplicate while keeping first-seen order
		unique_names = self._unique_trimmed(names)
		if not unique_names:
			return {}

		# Look up the actors that already exist, one chunk of names at a time
		actor_map: Dict[str, Actor] = {}
		for start in range(0, len(unique_names), LOOKUP_CHUNK_SIZE):
			chunk = unique_names[start:start + LOOKUP_CHUNK_SIZE]
			for actor in self.session.scalars(select(Actor).where(Actor.name.in_(chunk))):
				actor_map.setdefault(actor.name, actor)  # first row wins if storage holds twins

		# Create every missing actor in one batch
		new_actors = [Actor(name=name, search_name=normalize(name)) for name in unique_names if name not in actor_map]
		if new_actors:
			self.session.add_all(new_actors)
			self.session.flush()  # assign ids before association rows reference them
			for actor in new_actors:
				actor_map[actor.name] = actor

		logger.debug(f"[Actors] Resolved {len(unique_names)} names | existing={len(unique_names) - len(new_actors)} | created={len(new_actors)}")
		return actor_map

	@staticmethod
	def _unique_trimmed(names: Iterable[str]) -> List[str]:
		seen = set()
		result = []
		for name in names or []:
			trimmed = (name or "").strip()
			# Skip blanks and names we have already queued
			if trimmed and trimmed not in seen:
				seen.add(trimmed)
				result.append(trimmed)
		return result
