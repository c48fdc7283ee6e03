"""
Storage schema and session management (SQLAlchemy).
Movies and actors are linked through a many-to-many `movie_actors` table whose
rows cascade away with their movie; actor rows are shared and never cascade.
"""

from pathlib import Path  # create the SQLite directory on first run
from typing import List

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Table, create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from loguru import logger  # console logger

from .constants import ACTOR_NAME_MAX_LENGTH, TITLE_MAX_LENGTH


class Base(DeclarativeBase):
	pass


movie_actors = Table(
	"movie_actors",
	Base.metadata,
	Column("movie_id", Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
	Column("actor_id", Integer, ForeignKey("actors.id", ondelete="CASCADE"), primary_key=True),
)


class Actor(Base):
	__tablename__ = "actors"

	id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
	name: Mapped[str] = mapped_column(String(ACTOR_NAME_MAX_LENGTH), nullable=False)
	search_name: Mapped[str] = mapped_column(String(ACTOR_NAME_MAX_LENGTH), nullable=False)

	__table_args__ = (
		Index("idx_actors_name", "name"),
		Index("idx_actors_search_name", "search_name"),
	)

	def __repr__(self):
		return f"<Actor(id={self.id}, name='{self.name}')>"


class Movie(Base):
	__tablename__ = "movies"

	id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
	title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
	search_title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
	year: Mapped[int] = mapped_column(Integer, nullable=False)
	format: Mapped[str] = mapped_column(String(16), nullable=False)

	actors: Mapped[List[Actor]] = relationship(
		secondary=movie_actors,
		order_by=Actor.id,
		passive_deletes=True,
	)

	__table_args__ = (
		Index("idx_movies_title", "title"),
		Index("idx_movies_year", "year"),
		Index("idx_movies_search_title", "search_title"),
		Index("idx_movies_title_year_format", "title", "year", "format"),
	)

	def __repr__(self):
		return f"<Movie(id={self.id}, title='{self.title}', year={self.year})>"


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
	"""SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
	cursor = dbapi_conn.cursor()
	cursor.execute("PRAGMA foreign_keys=ON")
	cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
	"""
	Create an engine for `database_url`.
	In-memory SQLite shares one connection so every session sees the same data.
	"""
	url = make_url(database_url)
	is_sqlite = url.get_backend_name() == "sqlite"
	kwargs = {"echo": echo}

	if is_sqlite:
		kwargs["connect_args"] = {"check_same_thread": False}
		if url.database in (None, "", ":memory:"):
			kwargs["poolclass"] = StaticPool
		else:
			Path(url.database).parent.mkdir(parents=True, exist_ok=True)

	engine = create_engine(database_url, **kwargs)
	if is_sqlite:
		event.listen(engine, "connect", _enable_sqlite_foreign_keys)

	logger.info(f"[Database] Engine ready | backend={url.get_backend_name()} | database={url.database or ':memory:'}")
	return engine


def create_schema(engine: Engine):
	"""Create all tables and indexes that do not exist yet."""
	Base.metadata.create_all(engine)
	logger.debug("[Database] Schema ensured")


def build_session_factory(engine: Engine, create_tables: bool = True) -> sessionmaker:
	"""Return a session factory bound to `engine`, creating the schema first if asked."""
	if create_tables:
		create_schema(engine)
	return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
