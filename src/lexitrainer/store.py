"""Local SQLite store for vocabulary and learning progress.

One database per learner. Writes are plain read-modify-write; callers that
allow concurrent reviews of the same item must serialize them.
"""

from __future__ import annotations

import datetime
import logging
import os
from typing import List, Optional, Tuple

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .scheduler import LearningProgress
from .vocabulary import VocabularyItem, new_id

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "lexitrainer.db"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Base(DeclarativeBase):
    pass


class VocabularyRecord(Base):
    __tablename__ = "vocabulary_items"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    book_id: Mapped[Optional[str]] = mapped_column(String, index=True)
    chapter_id: Mapped[Optional[str]] = mapped_column(String)
    section_id: Mapped[Optional[str]] = mapped_column(String)
    source_text: Mapped[str] = mapped_column(Text, nullable=False)
    target_text: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)
    deleted_at: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)


class ProgressRecord(Base):
    __tablename__ = "learning_progress"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vocabulary_id: Mapped[str] = mapped_column(
        String, ForeignKey("vocabulary_items.id"), unique=True, nullable=False
    )
    ease_factor: Mapped[float] = mapped_column(Float, default=2.5)
    interval: Mapped[int] = mapped_column(Integer, default=0)
    repetitions: Mapped[int] = mapped_column(Integer, default=0)
    total_reviews: Mapped[int] = mapped_column(Integer, default=0)
    correct_reviews: Mapped[int] = mapped_column(Integer, default=0)
    next_review_date: Mapped[Optional[datetime.date]] = mapped_column(Date)
    last_review_date: Mapped[Optional[datetime.date]] = mapped_column(Date)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


def _to_item(record: VocabularyRecord) -> VocabularyItem:
    return VocabularyItem(
        id=record.id,
        source_text=record.source_text,
        target_text=record.target_text,
        book_id=record.book_id,
        chapter_id=record.chapter_id,
        section_id=record.section_id,
        notes=record.notes or "",
        created_at=record.created_at,
        updated_at=record.updated_at,
        deleted_at=record.deleted_at,
    )


def _to_progress(record: ProgressRecord) -> LearningProgress:
    return LearningProgress(
        vocabulary_id=record.vocabulary_id,
        ease_factor=record.ease_factor,
        interval=record.interval,
        repetitions=record.repetitions,
        total_reviews=record.total_reviews,
        correct_reviews=record.correct_reviews,
        next_review_date=record.next_review_date,
        last_review_date=record.last_review_date,
    )


class VocabularyStore:
    def __init__(self, db_path: Optional[str] = None, url: Optional[str] = None) -> None:
        if url is None:
            db_path = db_path or os.environ.get("LEXITRAINER_DB", DEFAULT_DB_PATH)
            url = f"sqlite:///{db_path}"
        self.engine = create_engine(url)
        # Keep returned rows usable after commit
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def init_db(self) -> None:
        """Create all tables."""
        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        return self.SessionLocal()

    def add_item(
        self,
        source_text: str,
        target_text: str,
        book_id: Optional[str] = None,
        chapter_id: Optional[str] = None,
        section_id: Optional[str] = None,
        notes: str = "",
    ) -> VocabularyItem:
        record = VocabularyRecord(
            id=new_id(),
            book_id=book_id,
            chapter_id=chapter_id,
            section_id=section_id,
            source_text=source_text,
            target_text=target_text,
            notes=notes or "",
        )
        with self.get_session() as session:
            session.add(record)
            session.commit()
            item = _to_item(record)
        logger.debug("Added vocabulary item %s to scope %r", item.id, book_id)
        return item

    def get_item(self, item_id: str) -> Optional[VocabularyItem]:
        with self.get_session() as session:
            record = session.get(VocabularyRecord, item_id)
            return _to_item(record) if record else None

    def soft_delete_item(self, item_id: str) -> bool:
        """Mark an item deleted; the row and its progress are kept."""
        with self.get_session() as session:
            record = session.get(VocabularyRecord, item_id)
            if record is None or record.deleted_at is not None:
                return False
            record.deleted_at = _utcnow()
            session.commit()
        logger.info("Soft-deleted vocabulary item %s", item_id)
        return True

    def load_scope(self, scope_id: Optional[str]) -> List[VocabularyItem]:
        """All live items of a book; None loads the unsorted items."""
        stmt = select(VocabularyRecord).where(VocabularyRecord.deleted_at.is_(None))
        if scope_id is None:
            stmt = stmt.where(VocabularyRecord.book_id.is_(None))
        else:
            stmt = stmt.where(VocabularyRecord.book_id == scope_id)
        with self.get_session() as session:
            return [_to_item(r) for r in session.scalars(stmt.order_by(VocabularyRecord.created_at))]

    def get_progress(self, vocabulary_id: str) -> Optional[LearningProgress]:
        with self.get_session() as session:
            record = session.scalars(
                select(ProgressRecord).where(ProgressRecord.vocabulary_id == vocabulary_id)
            ).first()
            return _to_progress(record) if record else None

    def save_progress(self, progress: LearningProgress) -> None:
        """Insert or replace the progress row for ``progress.vocabulary_id``."""
        if not progress.vocabulary_id:
            raise ValueError("Progress must reference a vocabulary id")
        with self.get_session() as session:
            record = session.scalars(
                select(ProgressRecord).where(ProgressRecord.vocabulary_id == progress.vocabulary_id)
            ).first()
            if record is None:
                record = ProgressRecord(vocabulary_id=progress.vocabulary_id)
                session.add(record)
            record.ease_factor = progress.ease_factor
            record.interval = progress.interval
            record.repetitions = progress.repetitions
            record.total_reviews = progress.total_reviews
            record.correct_reviews = progress.correct_reviews
            record.next_review_date = progress.next_review_date
            record.last_review_date = progress.last_review_date
            session.commit()
        logger.debug(
            "Saved progress for %s: interval=%d reps=%d ease=%.2f",
            progress.vocabulary_id, progress.interval, progress.repetitions, progress.ease_factor,
        )

    def due_items(
        self,
        scope_id: Optional[str],
        today: Optional[datetime.date] = None,
    ) -> List[Tuple[VocabularyItem, Optional[LearningProgress]]]:
        """Items due on ``today``: never-reviewed items first, then oldest due date."""
        today = today or datetime.date.today()
        stmt = (
            select(VocabularyRecord, ProgressRecord)
            .outerjoin(ProgressRecord, ProgressRecord.vocabulary_id == VocabularyRecord.id)
            .where(VocabularyRecord.deleted_at.is_(None))
        )
        if scope_id is None:
            stmt = stmt.where(VocabularyRecord.book_id.is_(None))
        else:
            stmt = stmt.where(VocabularyRecord.book_id == scope_id)

        due: List[Tuple[VocabularyItem, Optional[LearningProgress]]] = []
        with self.get_session() as session:
            for vocab, progress in session.execute(stmt).all():
                if progress is None or progress.next_review_date is None:
                    due.append((_to_item(vocab), None))
                elif progress.next_review_date <= today:
                    due.append((_to_item(vocab), _to_progress(progress)))

        due.sort(key=lambda pair: (
            pair[1] is not None,
            pair[1].next_review_date if pair[1] is not None else datetime.date.min,
        ))
        return due
