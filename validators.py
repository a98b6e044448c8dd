import logging
from typing import Iterable, NamedTuple, Optional

from bson import ObjectId
from pymongo.database import Database

from database import MAPS

log = logging.getLogger(__name__)


class ValidationResult(NamedTuple):
    failed: bool
    failed_id: Optional[str] = None


def validate_object_ids(ids: Iterable[str]) -> ValidationResult:
    """Check that every id is a 24-character hex ObjectId string.

    Only the format is checked, not whether the document exists. The first
    invalid id is reported.
    """
    for id_ in ids:
        if not isinstance(id_, str) or not ObjectId.is_valid(id_):
            return ValidationResult(failed=True, failed_id=id_)
    return ValidationResult(failed=False)


def check_map_name_exists(db: Database, name: str):
    """Return the map named exactly ``name``, or None.

    Check-then-insert is not atomic: two concurrent creates can both pass.
    """
    existing = db[MAPS].find_one({"name": name})
    if existing:
        log.info(f"Map with name '{name}' already exists")
    return existing
