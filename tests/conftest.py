"""
Shared fixtures: every test gets its own in-memory SQLite catalog.
"""

import pytest

from movie_catalog.config import Settings
from movie_catalog.database import build_engine, build_session_factory
from movie_catalog.duplicate_detector import DuplicateDetector
from movie_catalog.models import MovieRecord
from movie_catalog.query_engine import QueryEngine
from movie_catalog.repository import MovieRepository
from movie_catalog.service import build_service


@pytest.fixture
def engine():
	engine = build_engine("sqlite://")
	yield engine
	engine.dispose()


@pytest.fixture
def session_factory(engine):
	return build_session_factory(engine)


@pytest.fixture
def detector(session_factory):
	return DuplicateDetector(session_factory)


@pytest.fixture
def repository(session_factory, detector):
	return MovieRepository(session_factory, detector)


@pytest.fixture
def query_engine(session_factory):
	return QueryEngine(session_factory)


@pytest.fixture
def service(session_factory):
	return build_service(Settings(database_url="sqlite://"), session_factory=session_factory)


@pytest.fixture
def seeded(repository):
	"""Three movies, created in this order."""
	matrix = repository.create(MovieRecord("The Matrix", 1999, "DVD", ["Keanu Reeves", "Carrie-Anne Moss"]))
	wick = repository.create(MovieRecord("John Wick", 2014, "Blu-Ray", ["Keanu Reeves"]))
	speed = repository.create(MovieRecord("Speed", 1994, "VHS", ["Sandra Bullock"]))
	return matrix, wick, speed
