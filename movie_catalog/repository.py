"""
Movie repository.
CRUD over movies and their actor links. Every multi-row write runs in one
transaction: it either commits as a whole or rolls back and re-raises.
"""

# Typing hints for clarity of public API
from typing import Dict, List, Optional, Sequence  # type hints

# SQLAlchemy statements, sessions and eager loading
from sqlalchemy import delete, func, select  # query building
from sqlalchemy.orm import Session, selectinload, sessionmaker  # unit of work

# Console logging
from loguru import logger  # console logger

# Our collaborators, tables and records
from .actor_resolver import ActorResolver  # names -> actor rows
from .database import Actor, Movie  # tables
from .duplicate_detector import DuplicateDetector, load_movies_by_key  # duplicate lookups
from .models import BulkCreateResult, MovieRecord, MovieUpdate, MovieWithActors, movie_from_row  # records
from .normalizer import normalize  # lowercase search key


class MovieRepository:
	"""
	Storage gateway for movies.
	`create_many` consults the duplicate detector before opening its transaction,
	so only genuinely new records reach the insert.
	"""

	def __init__(self, session_factory: sessionmaker, detector: DuplicateDetector):
		self.session_factory = session_factory  # opens sessions/transactions
		self.detector = detector  # used by create_many only

	# Single-row operations

	def create(self, record: MovieRecord) -> MovieWithActors:
		"""Insert one movie with its actors and return it as read back in the same transaction."""
		with self.session_factory.begin() as session:
			# Insert the movie row first so it has an id
			movie = Movie(
				title=record.title,
				search_title=normalize(record.title),
				year=record.year,
				format=record.format,
			)
			session.add(movie)
			session.flush()

			# Resolve or create the actors and link them
			self._replace_actors(session, movie, record.actors)
			session.flush()

			# Read back with actors in stored order
			created = self._load(session, movie.id)
			logger.info(f"[Repository] Created movie id={created.id} '{created.title}' with {len(created.actors)} actors")
			return created

	def get_by_id(self, movie_id: int) -> Optional[MovieWithActors]:
		with self.session_factory() as session:
			row = session.scalars(self._select_with_actors().where(Movie.id == movie_id)).first()
			return movie_from_row(row) if row else None

	def list_by_title_year_and_format(self, title: str, year: int, format: str) -> List[MovieWithActors]:
		with self.session_factory() as session:
			return [movie_from_row(m) for m in load_movies_by_key(session, title, year, format)]

	def update(self, movie_id: int, changes: MovieUpdate) -> Optional[MovieWithActors]:
		"""
		Apply a partial update. Actors are replaced only when a non-empty list is
		given. Returns None, without writing, when the movie does not exist.
		"""
		with self.session_factory.begin() as session:
			movie = session.get(Movie, movie_id)
			if movie is None:
				return None

			# Only the supplied columns change; the search key follows the title
			fields = changes.fields()
			if "title" in fields:
				fields["search_title"] = normalize(fields["title"])

			# An empty or missing actor list keeps the current cast
			if changes.actors:
				self._replace_actors(session, movie, changes.actors)

			for name, value in fields.items():
				setattr(movie, name, value)
			session.flush()

			updated = self._load(session, movie_id)
			logger.info(f"[Repository] Updated movie id={movie_id} | fields={sorted(fields)} | actors_replaced={bool(changes.actors)}")
			return updated

	def delete(self, movie_id: int) -> bool:
		"""Remove a movie; its actor links cascade, the actors stay."""
		with self.session_factory.begin() as session:
			result = session.execute(delete(Movie).where(Movie.id == movie_id))
			deleted = result.rowcount > 0  # 0 rows means the id was unknown
		logger.info(f"[Repository] Delete movie id={movie_id} | deleted={deleted}")
		return deleted

	def count(self, session: Optional[Session] = None) -> int:
		# Reuse the caller's session so the count sees its uncommitted rows
		if session is not None:
			return session.scalar(select(func.count(Movie.id)))
		with self.session_factory() as own_session:
			return own_session.scalar(select(func.count(Movie.id)))

	# Bulk creation

	def create_many(self, records: Sequence[MovieRecord]) -> BulkCreateResult:
		"""
		Insert every record that is not already stored.
		All actor names across the surviving records are resolved in one pass and
		the movies plus their links are inserted in one transaction.
		"""
		# 1) Drop records that already exist in storage
		filtered = self.detector.filter_duplicates(records)
		unique = filtered.kept

		with self.session_factory.begin() as session:
			# Nothing new: report the current size without writing
			if not unique:
				total = self.count(session)
				logger.info(f"[Repository] Bulk create: nothing new | skipped={filtered.skipped} | total={total}")
				return BulkCreateResult(created=[], total_after=total, skipped=filtered.skipped)

			# 2) Resolve every actor name of the batch at once
			resolver = ActorResolver(session)
			actor_map = resolver.resolve_by_names(name for record in unique for name in record.actors)

			# 3) Insert all movies with their links; any failure rolls back the batch
			movies = [self._build_movie(record, actor_map) for record in unique]
			session.add_all(movies)
			session.flush()

			created = [movie_from_row(m) for m in movies]
			total = self.count(session)

		logger.info(f"[Repository] Bulk create: inserted={len(created)} | skipped={filtered.skipped} | total={total}")
		return BulkCreateResult(created=created, total_after=total, skipped=filtered.skipped)

	# Helpers

	@staticmethod
	def _select_with_actors():
		return select(Movie).options(selectinload(Movie.actors))

	def _load(self, session: Session, movie_id: int) -> MovieWithActors:
		# populate_existing refreshes the actor list already held by the session
		stmt = self._select_with_actors().where(Movie.id == movie_id).execution_options(populate_existing=True)
		row = session.scalars(stmt).one()
		return movie_from_row(row)

	@staticmethod
	def _replace_actors(session: Session, movie: Movie, names: Optional[Sequence[str]]):
		if not names:
			return
		actor_map = ActorResolver(session).resolve_by_names(names)
		if actor_map:
			movie.actors = list(actor_map.values())  # old links are removed by the ORM

	@staticmethod
	def _build_movie(record: MovieRecord, actor_map: Dict[str, Actor]) -> Movie:
		# Link each actor once, in the record's order
		actors = []
		seen = set()
		for name in record.actors:
			actor = actor_map.get(name.strip())
			if actor is not None and actor.name not in seen:
				seen.add(actor.name)
				actors.append(actor)
		return Movie(
			title=record.title,
			search_title=normalize(record.title),
			year=record.year,
			format=record.format,
			actors=actors,
		)
