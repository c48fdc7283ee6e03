"""
Import file parsing and validation.
Turns the plain-text movie file into validated MovieRecords. The format is a
sequence of 4-line blocks separated by blank lines:

	Title: Blazing Saddles
	Release Year: 1974
	Format: VHS
	Stars: Mel Brooks, Clevon Little, Harvey Korman

Field names are case-insensitive and may appear in any order. The first bad
block aborts the whole file so nothing from it is ever written.
"""

import re  # line splitting
from typing import Dict, List, Optional

# Console logging
from loguru import logger  # console logger

from .constants import (
	ACTOR_NAME_MAX_LENGTH,
	ACTOR_NAME_REGEX,
	IMPORT_FIELDS,
	MAX_YEAR,
	MIN_YEAR,
	TITLE_MAX_LENGTH,
	VALID_FORMATS,
)
from .errors import InvalidFileContent, InvalidInputData, MoviesFileEmpty, MoviesMissingRequiredFields
from .models import ImportBlock, MovieRecord, record_from_block, split_stars

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_YEAR_RE = re.compile(r"^[+-]?\d+$")

# Attribute of ImportBlock each file field is stored in
_FIELD_ATTRS = {
	"Title": "title",
	"Release Year": "release_year",
	"Format": "format",
	"Stars": "stars",
}


class ImportParser:
	"""
	Parses and validates movie import files.
	"""

	def __init__(self, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR):
		"""Year bounds are injectable so tests can pin them."""
		self.min_year = min_year
		self.max_year = max_year

	def parse(self, raw: bytes) -> List[MovieRecord]:
		"""
		Parse the raw bytes of an upload into movie records.
		Raises InvalidFileContent, MoviesMissingRequiredFields or InvalidInputData
		for the first malformed block, MoviesFileEmpty when there is no block.
		"""
		content = self._decode(raw)
		records: List[MovieRecord] = []
		block: List[str] = []

		# Walk line by line; a blank line closes the current block
		for raw_line in _LINE_SPLIT_RE.split(content):
			line = raw_line.strip()
			if line:
				block.append(line)
				continue
			if block:
				records.append(self._parse_record(block))
				block = []

		# The last block need not be followed by a blank line
		if block:
			records.append(self._parse_record(block))

		if not records:
			raise MoviesFileEmpty()

		logger.info(f"[Importer] Parsed {len(records)} movie blocks")
		return records

	def _decode(self, raw: bytes) -> str:
		if not raw:
			raise MoviesFileEmpty()
		try:
			content = raw.decode("utf-8")
		except UnicodeDecodeError as e:
			logger.warning(f"[Importer] Rejecting file that is not valid UTF-8: {e}")
			raise InvalidFileContent({"errorDetail": "File must be UTF-8 encoded text"}) from e
		return content.lstrip("\ufeff")  # drop a byte-order mark

	def _parse_record(self, lines: List[str]) -> MovieRecord:
		block = self.parse_block(lines)
		self.validate_block(block)
		return record_from_block(block)

	def parse_block(self, lines: List[str]) -> ImportBlock:
		"""
		Split one block into its four fields.
		A block with the wrong number of lines is InvalidFileContent; a block of the
		right size lacking one of the field prefixes is MoviesMissingRequiredFields.
		"""
		if len(lines) != len(IMPORT_FIELDS):
			logger.warning(f"[Importer] Block has {len(lines)} lines, expected {len(IMPORT_FIELDS)}: {lines}")
			raise InvalidFileContent({
				"block": lines,
				"errorDetail": f"Movie block must contain exactly [{', '.join(IMPORT_FIELDS)}] fields",
			})

		values: Dict[str, str] = {}
		missing: List[str] = []
		for field in IMPORT_FIELDS:
			value = self._find_field(lines, field)
			if value is None:
				missing.append(field)
				continue
			values[_FIELD_ATTRS[field]] = value

		if missing:
			logger.warning(f"[Importer] Block is missing fields {missing}: {lines}")
			raise MoviesMissingRequiredFields({"missingFields": missing, "textBlock": lines})

		return ImportBlock(lines=list(lines), **values)

	@staticmethod
	def _find_field(lines: List[str], field: str) -> Optional[str]:
		prefix = f"{field.lower()}:"
		for line in lines:
			if line.lower().startswith(prefix):
				return line[len(prefix):].strip()
		return None

	def validate_block(self, block: ImportBlock):
		"""Check the field values of one block; the first failing check raises."""
		text_block = {
			"title": block.title,
			"releaseYear": block.release_year,
			"format": block.format,
			"stars": block.stars,
		}

		# Release year
		year = int(block.release_year) if _YEAR_RE.match(block.release_year) else None
		if year is None or not (self.min_year <= year <= self.max_year):
			raise InvalidInputData({
				"textBlock": text_block,
				"errorDetail": f"Release year must be a number between {self.min_year} and {self.max_year}",
			})

		# Format
		if block.format not in VALID_FORMATS:
			raise InvalidFileContent({
				"textBlock": text_block,
				"errorDetail": "Invalid format",
				"expectedValues": VALID_FORMATS,
			})

		# Stars
		actors = split_stars(block.stars)
		if not actors:
			raise InvalidFileContent({"textBlock": text_block, "errorDetail": "Stars field cannot be empty"})
		for actor in actors:
			if len(actor) > ACTOR_NAME_MAX_LENGTH:
				raise InvalidFileContent({"textBlock": text_block, "errorDetail": f'Actor name is too long: "{actor}"'})
			if not ACTOR_NAME_REGEX.match(actor):
				raise InvalidFileContent({
					"textBlock": text_block,
					"errorDetail": f'Actor name contains invalid characters: "{actor}"',
				})

		# Title
		if not block.title:
			raise InvalidFileContent({"textBlock": text_block, "errorDetail": "Title cannot be empty"})
		if len(block.title) > TITLE_MAX_LENGTH:
			raise InvalidFileContent({
				"textBlock": text_block,
				"errorDetail": f"Title exceeds maximum length of {TITLE_MAX_LENGTH} characters",
			})
