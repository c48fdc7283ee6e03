"""
Unit tests for the import parser: block splitting, field lookup and validation order.
"""

import pytest

from movie_catalog.errors import InvalidFileContent, InvalidInputData, MoviesFileEmpty, MoviesMissingRequiredFields
from movie_catalog.import_parser import ImportParser

parser = ImportParser(min_year=1895, max_year=2030)


def make_file(*blocks, sep="\n"):
	return (sep + sep).join(sep.join(lines) for lines in blocks).encode("utf-8")


def block(title="Blazing Saddles", year="1974", fmt="VHS", stars="Mel Brooks, Clevon Little, Harvey Korman"):
	return [f"Title: {title}", f"Release Year: {year}", f"Format: {fmt}", f"Stars: {stars}"]


def test_parse_single_block():
	records = parser.parse(make_file(block()))
	assert len(records) == 1
	record = records[0]
	assert record.title == "Blazing Saddles"
	assert record.year == 1974
	assert record.format == "VHS"
	assert record.actors == ["Mel Brooks", "Clevon Little", "Harvey Korman"]


def test_parse_multiple_blocks_keeps_order():
	raw = make_file(block(title="Casablanca", year="1942", fmt="DVD", stars="Humphrey Bogart"), block())
	assert [r.title for r in parser.parse(raw)] == ["Casablanca", "Blazing Saddles"]


def test_fields_in_any_order_and_any_case():
	lines = ["stars: Іван Миколайчук", "FORMAT: DVD", "title: Тіні забутих предків", "release year: 1965"]
	record = parser.parse(make_file(lines))[0]
	assert record.title == "Тіні забутих предків"
	assert record.year == 1965
	assert record.actors == ["Іван Миколайчук"]


def test_crlf_extra_blank_lines_and_bom():
	raw = "\ufeff".encode("utf-8") + make_file(block(), block(title="Speed", year="1994"), sep="\r\n") + b"\r\n\r\n\r\n"
	assert [r.title for r in parser.parse(raw)] == ["Blazing Saddles", "Speed"]


def test_last_block_without_trailing_newline():
	raw = make_file(block(), block(title="Speed"))  # ends right after the last Stars line
	assert len(parser.parse(raw)) == 2


def test_empty_stars_entries_are_dropped():
	record = parser.parse(make_file(block(stars="Mel Brooks, , Harvey Korman,")))[0]
	assert record.actors == ["Mel Brooks", "Harvey Korman"]


def test_empty_file():
	with pytest.raises(MoviesFileEmpty):
		parser.parse(b"")
	with pytest.raises(MoviesFileEmpty):
		parser.parse(b"\n  \n\r\n")


def test_not_utf8_is_invalid_content():
	with pytest.raises(InvalidFileContent):
		parser.parse(b"Title: \xff\xfe\n")


def test_wrong_line_count():
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(block()[:3]))
	assert exc.value.param_map["block"] == block()[:3]


def test_missing_field_is_reported_by_name():
	lines = block()
	lines[2] = "Media: VHS"
	with pytest.raises(MoviesMissingRequiredFields) as exc:
		parser.parse(make_file(lines))
	assert exc.value.param_map["missingFields"] == ["Format"]


@pytest.mark.parametrize("year", ["abc", "19x4", "1800", "2031", ""])
def test_bad_year_is_invalid_input(year):
	with pytest.raises(InvalidInputData) as exc:
		parser.parse(make_file(block(year=year)))
	assert "errorDetail" in exc.value.param_map


def test_bad_format():
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(block(fmt="Laserdisc")))
	assert exc.value.param_map["errorDetail"] == "Invalid format"


def test_year_is_checked_before_format():
	with pytest.raises(InvalidInputData):
		parser.parse(make_file(block(year="soon", fmt="Laserdisc")))


def test_empty_stars():
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(block(stars=" , ")))
	assert exc.value.param_map["errorDetail"] == "Stars field cannot be empty"


@pytest.mark.parametrize("stars", ["Mel Brooks, R2-D2", "Agent 47", "@home", "---", "Jane  Doe", "O''Brien"])
def test_invalid_actor_characters(stars):
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(block(stars=stars)))
	assert "invalid characters" in exc.value.param_map["errorDetail"]


def test_actor_name_punctuation_allowed():
	record = parser.parse(make_file(block(stars="Carrie-Anne Moss, Robert Downey Jr., Sinéad O'Connor")))[0]
	assert record.actors == ["Carrie-Anne Moss", "Robert Downey Jr.", "Sinéad O'Connor"]


def test_actor_name_too_long():
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(block(stars="A" * 256)))
	assert "too long" in exc.value.param_map["errorDetail"]


def test_empty_title():
	lines = block()
	lines[0] = "Title:"
	with pytest.raises(InvalidFileContent) as exc:
		parser.parse(make_file(lines))
	assert exc.value.param_map["errorDetail"] == "Title cannot be empty"


def test_title_too_long():
	with pytest.raises(InvalidFileContent):
		parser.parse(make_file(block(title="T" * 256)))


def test_one_bad_block_fails_the_whole_file():
	with pytest.raises(InvalidFileContent):
		parser.parse(make_file(block(), block(fmt="Betamax"), block(title="Speed")))
