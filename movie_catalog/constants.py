"""
Domain constants shared by the parser, the storage layer and the HTTP schemas.
"""

import re  # actor-name character class
from datetime import date  # current year for the release-year ceiling
from enum import Enum  # closed set of physical/digital formats


class MovieFormat(str, Enum):
	"""Formats a catalog entry can be stored in."""
	VHS = "VHS"
	DVD = "DVD"
	BLU_RAY = "Blu-Ray"
	DIGITAL = "Digital"


VALID_FORMATS = [f.value for f in MovieFormat]  # ["VHS", "DVD", "Blu-Ray", "Digital"]

MIN_YEAR = 1895  # first public film screening
MAX_YEAR = date.today().year + 10  # allow announced releases up to a decade ahead

TITLE_MAX_LENGTH = 255
ACTOR_NAME_MAX_LENGTH = 255
SEARCH_TERM_MAX_LENGTH = 255

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB upload ceiling
ALLOWED_MIME_TYPES = ("text/plain",)
ALLOWED_EXTENSIONS = (".txt",)

# Unicode letters plus dot, apostrophe, hyphen and space; at least one letter, no two separators in a row
ACTOR_NAME_REGEX = re.compile(r"^(?!.*[.'\- ]{2})(?=.*[^\W\d_])(?:[^\W\d_]|[.'\- ])+$")

# Field names of one record in an import file, in canonical order
IMPORT_FIELDS = ("Title", "Release Year", "Format", "Stars")

DEFAULT_LIMIT = 20
DEFAULT_OFFSET = 0
DEFAULT_SORT = "id"
DEFAULT_ORDER = "ASC"
MAX_LIMIT = 100
