from datetime import timezone
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from string_analyzer.models.analysis import StringAnalysis
from string_analyzer.schemas.analysis import StringProperties, StringResponse
from string_analyzer.services.properties import analyze_string, compute_sha256

logger = logging.getLogger(__name__)


def to_record(db_string: StringAnalysis) -> StringResponse:
    """Build a detached analysis record from a database row"""
    created_at = db_string.created_at
    if created_at is not None and created_at.tzinfo is None:
        # SQLite drops the offset; rows are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)

    return StringResponse(
        id=db_string.id,
        value=db_string.value,
        properties=StringProperties(
            length=db_string.length,
            is_palindrome=db_string.is_palindrome,
            unique_characters=db_string.unique_characters,
            word_count=db_string.word_count,
            sha256_hash=db_string.sha256_hash,
            character_frequency_map=db_string.character_frequency_map,
        ),
        created_at=created_at,
    )


class RecordStore:
    """Analysis records keyed by their string value.

    The store owns nothing but the session it is given. Everything it hands
    out is a detached ``StringResponse``, so callers can filter snapshots
    without touching the database again.
    """

    def __init__(self, db: Session):
        self.db = db

    def _find(self, value: str) -> Optional[StringAnalysis]:
        return self.db.query(StringAnalysis).filter(StringAnalysis.id == compute_sha256(value)).first()

    def add(self, value: str) -> Optional[StringResponse]:
        """Analyze and store a value; returns None if it is already stored"""
        if self._find(value) is not None:
            return None

        properties = analyze_string(value)
        db_string = StringAnalysis(id=properties["sha256_hash"], value=value, **properties)

        self.db.add(db_string)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"String with hash {properties['sha256_hash'][:12]} was stored concurrently")
            return None

        self.db.refresh(db_string)
        logger.info(f"Stored analysis {db_string.id[:12]} (length={db_string.length})")
        return to_record(db_string)

    def get(self, value: str) -> Optional[StringResponse]:
        db_string = self._find(value)
        if db_string is None:
            return None
        return to_record(db_string)

    def delete(self, value: str) -> bool:
        """Delete string analysis by value"""
        db_string = self._find(value)
        if db_string is None:
            return False

        string_id = db_string.id
        self.db.delete(db_string)
        self.db.commit()
        logger.info(f"Deleted analysis {string_id[:12]}")
        return True

    def snapshot(self) -> List[StringResponse]:
        """All records in insertion order"""
        rows = self.db.query(StringAnalysis).order_by(StringAnalysis.pk).all()
        return [to_record(row) for row in rows]
