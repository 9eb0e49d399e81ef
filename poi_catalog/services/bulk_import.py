"""
Bulk import of OpenStreetMap GeoJSON exports.

Every ``*.geojson`` file of a directory is imported with one category for
the whole file, derived from its name (``laser-game.geojson`` ->
``"laser game"``). Per-feature tags are ignored for the category in this
mode.
"""
import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poi_catalog.core.exceptions import ValidationError
from poi_catalog.services.activity_service import ActivityService
from poi_catalog.services.categories import category_from_filename
from poi_catalog.services.geojson_converter import osm_feature_to_record

logger = logging.getLogger(__name__)


@dataclass
class FeatureFailure:
    name: str
    error: str


@dataclass
class FileImportResult:
    file: str
    category: Optional[str] = None
    imported: int = 0
    failed: int = 0
    failures: List[FeatureFailure] = field(default_factory=list)


@dataclass
class ImportTotals:
    files: List[FileImportResult] = field(default_factory=list)
    backup: Optional[Path] = None
    cleared: int = 0

    @property
    def imported(self) -> int:
        return sum(f.imported for f in self.files)

    @property
    def failed(self) -> int:
        return sum(f.failed for f in self.files)


def backup_database(db_path: Path, backup_dir: Path, now: Optional[datetime] = None) -> Optional[Path]:
    """
    Copy a SQLite database file to ``backup_dir`` with a timestamped name.

    Returns:
        Path of the copy, or None when there is no database file yet
    """
    db_path = Path(db_path)
    if not db_path.exists():
        logger.warning(f"No database at {db_path}, skipping backup")
        return None

    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%Hh%M")
    target = backup_dir / f"{db_path.stem}_{stamp}{db_path.suffix}"
    shutil.copy2(db_path, target)
    size_mb = target.stat().st_size / (1024 * 1024)
    logger.info(f"Database backup written to {target} ({size_mb:.2f} MB)")
    return target


def import_file(db: Session, path: Path) -> FileImportResult:
    """
    Import one GeoJSON FeatureCollection file.

    An unreadable file or a document that is not a FeatureCollection counts
    as a single failure; feature failures never stop the file.
    """
    path = Path(path)
    result = FileImportResult(file=path.name)

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error(f"Could not read {path.name}: {exc}")
        result.failed = 1
        result.failures.append(FeatureFailure(name=path.name, error=str(exc)))
        return result

    if not isinstance(document, dict) or document.get("type") != "FeatureCollection" \
            or not isinstance(document.get("features"), list):
        logger.warning(f"{path.name}: invalid format, expected a FeatureCollection")
        result.failed = 1
        result.failures.append(FeatureFailure(name=path.name, error="Expected a FeatureCollection"))
        return result

    result.category = category_from_filename(path)
    logger.info(f"Importing {path.name} as category {result.category!r}")

    service = ActivityService(db)
    for feature in document["features"]:
        properties = feature.get("properties") if isinstance(feature, dict) else None
        properties = properties if isinstance(properties, dict) else {}
        label = properties.get("name") or "unknown"
        try:
            record = osm_feature_to_record(feature, category_override=result.category)
            service.create(record)
        except ValidationError as exc:
            result.failed += 1
            result.failures.append(FeatureFailure(name=str(label), error=exc.message))
        except SQLAlchemyError as exc:
            db.rollback()
            result.failed += 1
            result.failures.append(FeatureFailure(name=str(label), error=str(exc)))
        else:
            result.imported += 1

    logger.info(
        f"{path.name}: {result.imported} imported, {result.failed} failed",
        extra={"file": path.name, "imported": result.imported, "failed": result.failed},
    )
    return result


def run_import(
    db: Session,
    directory: Path,
    reset: bool = True,
    db_path: Optional[Path] = None,
    backup_dir: Optional[Path] = None,
) -> ImportTotals:
    """
    Import every ``.geojson`` file of ``directory``.

    Args:
        db: Open session
        directory: Folder holding the files
        reset: Delete existing favorites and activities first
        db_path: SQLite file to back up before importing (no backup when None)
        backup_dir: Destination of the backup

    Raises:
        FileNotFoundError: directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"GeoJSON directory {directory} does not exist")

    totals = ImportTotals()
    if db_path is not None and backup_dir is not None:
        totals.backup = backup_database(db_path, backup_dir)

    files = sorted(directory.glob("*.geojson"))
    if not files:
        logger.warning(f"No .geojson files found in {directory}")
        return totals
    logger.info(f"Found {len(files)} GeoJSON file(s) in {directory}")

    if reset:
        totals.cleared = ActivityService(db).clear()
        logger.info(f"Cleared {totals.cleared} existing activities")

    for path in files:
        totals.files.append(import_file(db, path))

    logger.info(
        f"Import finished: {totals.imported} imported, {totals.failed} failed, {len(files)} file(s)"
    )
    return totals
