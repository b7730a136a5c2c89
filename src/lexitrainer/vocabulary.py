"""Vocabulary items and an in-memory index grouped by scope.

A scope is a book id; items without a book are "unsorted" and live under the
None scope. Soft-deleted items stay in the index but are never returned.
"""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class VocabularyItem:
    id: str
    source_text: str  # native language
    target_text: str  # foreign language
    book_id: Optional[str] = None
    chapter_id: Optional[str] = None
    section_id: Optional[str] = None
    notes: str = ""
    created_at: datetime.datetime = field(default_factory=_utcnow)
    updated_at: datetime.datetime = field(default_factory=_utcnow)
    deleted_at: Optional[datetime.datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class VocabularyIndex:
    items_by_scope: Dict[Optional[str], List[VocabularyItem]] = field(default_factory=dict)

    def add_item(self, item: VocabularyItem) -> None:
        self.items_by_scope.setdefault(item.book_id, []).append(item)

    def load_scope(self, scope_id: Optional[str]) -> List[VocabularyItem]:
        return [i for i in self.items_by_scope.get(scope_id, []) if not i.is_deleted]

    def soft_delete(self, item_id: str) -> bool:
        for items in self.items_by_scope.values():
            for item in items:
                if item.id == item_id and not item.is_deleted:
                    item.deleted_at = _utcnow()
                    item.updated_at = item.deleted_at
                    return True
        return False
