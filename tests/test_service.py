"""
Tests for the movie service: duplicate rejection, not-found handling and imports.
"""

import pytest

from movie_catalog.errors import InvalidFileContent, MovieAlreadyExists, MovieDoesNotExist
from movie_catalog.models import ListQuery, MovieRecord, MovieUpdate


def make_file(*blocks):
	return "\n\n".join("\n".join(lines) for lines in blocks).encode("utf-8")


def block(title, year, fmt, stars):
	return [f"Title: {title}", f"Release Year: {year}", f"Format: {fmt}", f"Stars: {stars}"]


def test_create_rejects_equivalent_movie(service):
	service.create(MovieRecord("Casablanca", 1942, "DVD", ["Humphrey Bogart", "Ingrid Bergman"]))
	with pytest.raises(MovieAlreadyExists) as exc:
		service.create(MovieRecord(" Casablanca ", 1942, "DVD", ["ingrid bergman", "HUMPHREY BOGART"]))
	assert exc.value.status_code == 409
	assert exc.value.param_map["title"] == " Casablanca "


def test_create_rejects_cyrillic_cast_in_any_order_and_case(service):
	service.create(MovieRecord("А-тест", 2011, "Blu-Ray", ["Іван Петренко", "Marta"]))
	with pytest.raises(MovieAlreadyExists):
		service.create(MovieRecord("А-тест", 2011, "Blu-Ray", [" marta ", "іван петренко"]))
	assert service.list(ListQuery()).total == 1


@pytest.mark.parametrize("record", [
	MovieRecord("Casablanca", 1943, "DVD", ["Humphrey Bogart", "Ingrid Bergman"]),
	MovieRecord("Casablanca", 1942, "VHS", ["Humphrey Bogart", "Ingrid Bergman"]),
	MovieRecord("Casablanca II", 1942, "DVD", ["Humphrey Bogart", "Ingrid Bergman"]),
	MovieRecord("Casablanca", 1942, "DVD", ["Humphrey Bogart"]),
])
def test_create_accepts_any_difference(service, record):
	service.create(MovieRecord("Casablanca", 1942, "DVD", ["Humphrey Bogart", "Ingrid Bergman"]))
	assert service.create(record).id == 2


def test_get_update_delete_missing(service):
	with pytest.raises(MovieDoesNotExist):
		service.get(7)
	with pytest.raises(MovieDoesNotExist):
		service.update(7, MovieUpdate(title="x"))
	with pytest.raises(MovieDoesNotExist) as exc:
		service.delete(7)
	assert exc.value.param_map == {"movieId": 7}


def test_get_update_delete(service):
	movie = service.create(MovieRecord("Heat", 1995, "DVD", ["Al Pacino"]))
	assert service.get(movie.id).title == "Heat"
	assert service.update(movie.id, MovieUpdate(year=1996)).year == 1996
	service.delete(movie.id)
	with pytest.raises(MovieDoesNotExist):
		service.get(movie.id)


def test_import_counts_imported_and_duplicates(service):
	service.create(MovieRecord("Speed", 1994, "VHS", ["Keanu Reeves", "Sandra Bullock"]))
	raw = make_file(
		block("Speed", 1994, "VHS", "Sandra Bullock, Keanu Reeves"),
		block("Heat", 1995, "DVD", "Al Pacino, Robert De Niro"),
		block("Тіні забутих предків", 1965, "Blu-Ray", "Іван Миколайчук, Лариса Кадочникова"),
	)
	result = service.import_movies(raw)
	assert result.imported == 2
	assert result.duplicates == 1
	assert result.total == 3
	assert [m.title for m in result.items] == ["Heat", "Тіні забутих предків"]
	assert service.list(ListQuery(actor="лариса")).total == 1


def test_import_twice_is_idempotent(service):
	raw = make_file(block("Heat", 1995, "DVD", "Al Pacino"))
	service.import_movies(raw)
	result = service.import_movies(raw)
	assert result.imported == 0
	assert result.duplicates == 1
	assert result.total == 1


@pytest.mark.parametrize("bad_block", [
	block("Tron", 1982, "Laserdisc", "Jeff Bridges"),
	block("Tron", 1982, "DVD", "Jeff Bridges")[:3],
])
def test_import_with_bad_block_writes_nothing(service, bad_block):
	raw = make_file(block("Heat", 1995, "DVD", "Al Pacino"), bad_block)
	with pytest.raises(InvalidFileContent):
		service.import_movies(raw)
	assert service.list(ListQuery()).total == 0
