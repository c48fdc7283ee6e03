"""
Movie service.
High-level operations the HTTP layer calls: create, get, update, delete, list
and import. Translates "not found" and "duplicate" outcomes of the storage
components into catalog errors; everything else propagates unchanged.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from loguru import logger  # console logger

from .collation import TitleCollator
from .config import Settings
from .database import build_engine, build_session_factory
from .duplicate_detector import DuplicateDetector
from .errors import MovieAlreadyExists, MovieDoesNotExist
from .import_parser import ImportParser
from .models import ImportResult, ListQuery, ListResult, MovieRecord, MovieUpdate, MovieWithActors
from .query_engine import QueryEngine
from .repository import MovieRepository


@dataclass
class MovieService:
	repository: MovieRepository
	detector: DuplicateDetector
	query_engine: QueryEngine
	parser: ImportParser

	def create(self, record: MovieRecord) -> MovieWithActors:
		"""Create a movie unless an equivalent one (same key and actor set) exists."""
		if self.detector.check_duplicate(record.title, record.year, record.format, record.actors):
			raise MovieAlreadyExists({
				"title": record.title,
				"year": record.year,
				"format": record.format,
				"actors": list(record.actors),
			})
		return self.repository.create(record)

	def get(self, movie_id: int) -> MovieWithActors:
		movie = self.repository.get_by_id(movie_id)
		if movie is None:
			raise MovieDoesNotExist({"movieId": movie_id})
		return movie

	def update(self, movie_id: int, changes: MovieUpdate) -> MovieWithActors:
		movie = self.repository.update(movie_id, changes)
		if movie is None:
			raise MovieDoesNotExist({"movieId": movie_id})
		return movie

	def delete(self, movie_id: int):
		if not self.repository.delete(movie_id):
			raise MovieDoesNotExist({"movieId": movie_id})

	def list(self, query: ListQuery) -> ListResult:
		return self.query_engine.list(query)

	def import_movies(self, raw: bytes) -> ImportResult:
		"""
		Parse an import file and bulk-create its movies.
		A malformed block aborts before anything is written; duplicates are not
		errors, they are skipped and counted.
		"""
		records = self.parser.parse(raw)
		result = self.repository.create_many(records)
		logger.info(
			f"[Importer] Import finished | blocks={len(records)} | imported={len(result.created)} "
			f"| duplicates={result.skipped} | total={result.total_after}"
		)
		return ImportResult(
			items=result.created,
			imported=len(result.created),
			duplicates=result.skipped,
			total=result.total_after,
		)


def build_service(
	settings: Optional[Settings] = None,
	engine: Optional[Engine] = None,
	session_factory: Optional[sessionmaker] = None,
) -> MovieService:
	"""
	Wire every component once. Pass an engine or a session factory to share an
	existing database (tests use an in-memory one).
	"""
	settings = settings or Settings.from_env()
	if session_factory is None:
		engine = engine or build_engine(settings.database_url, echo=settings.db_echo)
		session_factory = build_session_factory(engine)

	detector = DuplicateDetector(session_factory)
	return MovieService(
		repository=MovieRepository(session_factory, detector),
		detector=detector,
		query_engine=QueryEngine(session_factory, TitleCollator()),
		parser=ImportParser(),
	)
