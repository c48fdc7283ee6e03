"""
Import a movie text file into the catalog database.

This script:
1) Reads the given .txt file
2) Parses and validates every movie block
3) Skips movies already stored (same title, year, format and cast)
4) Inserts the rest in one transaction and reports the counts

Usage:
    python -m scripts.import_movies data/sample_movies.txt
    python -m scripts.import_movies movies.txt --database-url sqlite:///./data/other.sqlite

The database URL defaults to DATABASE_URL from the environment / .env file.
"""

import argparse  # command-line options
import sys  # exit codes
import time  # measure step timings
from dataclasses import replace  # override settings from the command line
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from movie_catalog.config import Settings, configure_logging  # env-based settings
from movie_catalog.errors import CatalogError  # import failures worth reporting
from movie_catalog.service import build_service  # component wiring


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Import movies from a plain-text file.")
	parser.add_argument("file", type=Path, help="path to the .txt import file")
	parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (defaults to DATABASE_URL)")
	return parser.parse_args(argv)


def main(argv=None) -> int:
	args = parse_args(argv)
	settings = Settings.from_env()
	if args.database_url:
		settings = replace(settings, database_url=args.database_url)
	configure_logging(settings.log_level)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Import Movies")
	logger.info("=" * 60)

	if not args.file.exists():
		logger.error(f"[Import] File not found: {args.file}")
		return 1

	# 1) Read the file
	raw = args.file.read_bytes()
	logger.info(f"[1/2] Read {len(raw)} bytes from {args.file}")
	if len(raw) > settings.max_file_size:
		logger.error(f"[Import] File exceeds the {settings.max_file_size} byte limit")
		return 1

	# 2) Parse, de-duplicate and insert
	t0 = time.time()
	service = build_service(settings)
	try:
		result = service.import_movies(raw)
	except CatalogError as e:
		logger.error(f"[Import] {e.code}: {e.message} | {e.param_map}")
		return 2
	logger.info(f"[2/2] Imported {result.imported} movies in {time.time() - t0:.2f}s")
	logger.info(f"[OK] duplicates skipped={result.duplicates} | movies in catalog={result.total}")
	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main())  # invoke importer
