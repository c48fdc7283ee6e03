"""
Data models for the Movie Catalog.
Defines the typed records that flow between the import parser, the duplicate
detector, the repository and the HTTP layer, plus the conversions between them.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple  # lists, optional values, and fixed-size tuples

from .constants import DEFAULT_LIMIT, DEFAULT_OFFSET, DEFAULT_ORDER, DEFAULT_SORT


@dataclass
class ImportBlock:
	"""
	Raw text fields of one record in an import file, values already stripped
	of the `<Field>:` prefix but otherwise untouched.
	"""
	title: str  # value of the "Title" line
	release_year: str  # value of the "Release Year" line, not yet an int
	format: str  # value of the "Format" line
	stars: str  # comma-separated actor names
	lines: List[str] = field(default_factory=list)  # original block lines for error reports


@dataclass
class MovieRecord:
	"""
	A validated movie ready to be written: what clients send on create and what
	the import parser produces for each block.
	"""
	title: str
	year: int
	format: str
	actors: List[str]

	def key(self) -> Tuple[str, int, str]:
		"""Composite (title, year, format) lookup key used for duplicate grouping."""
		return (self.title.strip(), self.year, self.format.strip())


@dataclass
class MovieUpdate:
	"""Partial update; `None` means "leave as is"."""
	title: Optional[str] = None
	year: Optional[int] = None
	format: Optional[str] = None
	actors: Optional[List[str]] = None

	def fields(self) -> Dict[str, Any]:
		"""Scalar columns that were actually supplied."""
		values = {"title": self.title, "year": self.year, "format": self.format}
		return {k: v for k, v in values.items() if v is not None}


@dataclass
class ActorOut:
	id: int
	name: str


@dataclass
class MovieWithActors:
	"""A persisted movie with its actor list, detached from any session."""
	id: int
	title: str
	year: int
	format: str
	actors: List[ActorOut] = field(default_factory=list)

	def actor_names(self) -> List[str]:
		return [a.name for a in self.actors]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"year": self.year,
			"format": self.format,
			"actors": [{"id": a.id, "name": a.name} for a in self.actors],
		}


@dataclass
class ListQuery:
	"""Filters, pagination and sort for a listing request."""
	limit: int = DEFAULT_LIMIT
	offset: int = DEFAULT_OFFSET
	sort: str = DEFAULT_SORT  # "id" | "title" | "year"
	order: str = DEFAULT_ORDER  # "ASC" | "DESC"
	title: Optional[str] = None  # substring of the title
	actor: Optional[str] = None  # substring of any actor name (required match)
	search: Optional[str] = None  # substring of the title or of any actor name


@dataclass
class ListResult:
	items: List[MovieWithActors]
	total: int  # filtered count, independent of pagination


@dataclass
class BulkCreateResult:
	created: List[MovieWithActors]
	total_after: int  # movies in storage once the batch committed
	skipped: int  # duplicates dropped before the insert


@dataclass
class ImportResult:
	items: List[MovieWithActors]
	imported: int
	duplicates: int
	total: int


def split_stars(stars: str) -> List[str]:
	"""Split a comma-separated actor list into trimmed, non-empty names."""
	return [name.strip() for name in (stars or "").split(",") if name.strip()]


def record_from_block(block: ImportBlock) -> MovieRecord:
	"""Convert an already validated import block into a movie record."""
	return MovieRecord(
		title=block.title,
		year=int(block.release_year),
		format=block.format,
		actors=split_stars(block.stars),
	)


def movie_from_row(row: Any) -> MovieWithActors:
	"""Copy an ORM movie row (with actors loaded) into a detached record."""
	return MovieWithActors(
		id=row.id,
		title=row.title,
		year=row.year,
		format=row.format,
		actors=[ActorOut(id=a.id, name=a.name) for a in row.actors],
	)
