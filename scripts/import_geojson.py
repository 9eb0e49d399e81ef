#!/usr/bin/env python3
"""
Import every .geojson file of a directory into the catalog.

The category of each activity is derived from its file name. By default the
SQLite database is backed up and existing activities are deleted first.

Usage: python scripts/import_geojson.py [DIRECTORY] [--keep-existing] [--no-backup]
"""
import argparse
import logging
import sys
from pathlib import Path

from poi_catalog.config import get_settings
from poi_catalog.core.db import db_session, init_db
from poi_catalog.core.logging import configure_logging
from poi_catalog.services.bulk_import import run_import

logger = logging.getLogger("import_geojson")


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Bulk import GeoJSON files")
    parser.add_argument(
        "directory",
        nargs="?",
        default=settings.imports.geojson_dir,
        help=f"Directory holding .geojson files (default: {settings.imports.geojson_dir})"
    )
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Add to the existing activities instead of replacing them"
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Skip the database backup"
    )
    args = parser.parse_args(argv)

    configure_logging(level=settings.log_level.value, json_format=False, fmt="%(message)s")
    init_db()

    db_path = None if args.no_backup else settings.database.sqlite_path
    try:
        with db_session() as db:
            totals = run_import(
                db,
                Path(args.directory),
                reset=not args.keep_existing,
                db_path=db_path,
                backup_dir=Path(settings.imports.backup_dir),
            )
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    for result in totals.files:
        for failure in result.failures[:settings.imports.max_reported_errors]:
            logger.info(f"   - {result.file}: {failure.name}: {failure.error}")
        hidden = len(result.failures) - settings.imports.max_reported_errors
        if hidden > 0:
            logger.info(f"   ... and {hidden} more error(s) in {result.file}")

    logger.info(f"Activities imported : {totals.imported}")
    logger.info(f"Errors              : {totals.failed}")
    logger.info(f"Files processed     : {len(totals.files)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
