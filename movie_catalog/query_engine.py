"""
Listing module.
Builds filtered, sorted and paginated movie lists. Sorting by id or year is
pushed to the database; sorting by title is done in memory with the title
collator because the database collation misorders non-Latin alphabets.
"""

# Typing hints for clarity of public API
from typing import List, Optional  # type hints

# SQLAlchemy expression helpers and session types
from sqlalchemy import distinct, func, or_, select  # query building
from sqlalchemy.orm import selectinload, sessionmaker  # eager actor loading

# Console logging
from loguru import logger  # console logger

# Our collator, ORM tables, records and LIKE helpers
from .collation import TitleCollator  # locale-aware title order
from .database import Actor, Movie, movie_actors  # tables
from .models import ListQuery, ListResult, movie_from_row  # request/response records
from .normalizer import LIKE_ESCAPE, like_pattern  # escaped substring patterns


class QueryEngine:
	"""
	Filter semantics:
	- `title`: substring of the normalized title.
	- `search`: substring of the normalized title OR of any actor's normalized
	  name. With `title` also present, both share one OR group whose title
	  branch uses the `title` term.
	- `actor`: movie must have at least one actor matching the substring; ANDed
	  with everything else.
	"""

	def __init__(self, session_factory: sessionmaker, collator: Optional[TitleCollator] = None):
		self.session_factory = session_factory
		self.collator = collator or TitleCollator()  # built once, reused per request

	def list(self, query: ListQuery) -> ListResult:
		# Translate the filters into WHERE conditions shared by count and page
		conditions = self._build_conditions(query)
		descending = query.order.upper() == "DESC"

		with self.session_factory() as session:
			# Total number of matches, independent of limit/offset
			count_stmt = select(func.count(distinct(Movie.id))).where(*conditions)
			total = session.scalar(count_stmt)

			# Base query; actors come in one extra SELECT for the whole page
			stmt = select(Movie).options(selectinload(Movie.actors)).where(*conditions)

			if query.sort == "title":
				# Load every match, order with the collator, then slice the page
				rows = list(session.scalars(stmt))
				rows = self.collator.sort(rows, key=lambda m: m.title, descending=descending)
				rows = rows[query.offset:query.offset + query.limit]
			else:
				# Let the database order and paginate; id breaks ties
				column = Movie.year if query.sort == "year" else Movie.id
				ordering = [column.desc() if descending else column.asc()]
				if column is not Movie.id:
					ordering.append(Movie.id.desc() if descending else Movie.id.asc())
				stmt = stmt.order_by(*ordering).limit(query.limit).offset(query.offset)
				rows = list(session.scalars(stmt))

			# Detach into plain records before the session closes
			items = [movie_from_row(m) for m in rows]

		logger.debug(
			f"[Query] list sort={query.sort} {query.order} limit={query.limit} offset={query.offset} "
			f"title={query.title!r} actor={query.actor!r} search={query.search!r} -> {len(items)}/{total}"
		)
		return ListResult(items=items, total=total)

	def _build_conditions(self, query: ListQuery) -> List:
		conditions = []

		# Title and search share one OR group
		if query.title or query.search:
			title_term = query.title or query.search
			group = [Movie.search_title.like(like_pattern(title_term), escape=LIKE_ESCAPE)]
			if query.search:
				group.append(Movie.id.in_(self._movie_ids_with_actor(query.search)))
			conditions.append(or_(*group))

		# Actor is a required match on top of everything else
		if query.actor:
			conditions.append(Movie.id.in_(self._movie_ids_with_actor(query.actor)))

		return conditions

	@staticmethod
	def _movie_ids_with_actor(term: str):
		"""Sub-select of ids of movies having an actor whose normalized name contains `term`."""
		return (
			select(movie_actors.c.movie_id)
			.join(Actor, Actor.id == movie_actors.c.actor_id)
			.where(Actor.search_name.like(like_pattern(term), escape=LIKE_ESCAPE))
		)
