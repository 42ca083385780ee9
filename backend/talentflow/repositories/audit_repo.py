"""Audit Repository - Data access for transition audit records"""
from typing import List, Optional
from pymongo import DESCENDING
from pymongo.client_session import ClientSession
from pymongo.collection import Collection

from .mongo_client import get_collection
from ..domain.models import AuditRecord
from ..domain.enums import EntityKind
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Newest first; sequence breaks ties between equal timestamps
HISTORY_SORT = [("timestamp", DESCENDING), ("sequence", DESCENDING)]


class AuditRepository:
    """Repository for audit records (append-only)"""

    def __init__(self):
        self._audit_records: Collection = get_collection("audit_records")

    def insert(self, record: AuditRecord, session: Optional[ClientSession] = None) -> AuditRecord:
        """Insert one audit record"""
        doc = record.model_dump()
        doc["_id"] = record.audit_record_id

        self._audit_records.insert_one(doc, session=session)
        logger.info(
            f"Created audit record: {record.from_status.value} -> {record.to_status.value}",
            extra={
                "entity_kind": record.entity_kind.value,
                "entity_id": record.entity_id,
                "actor_id": record.actor_id,
            }
        )
        return record

    def find_for_entity(
        self,
        entity_kind: EntityKind,
        entity_id: str,
        skip: int = 0,
        limit: int = 0
    ) -> List[AuditRecord]:
        """Get audit records for an entity, newest first (limit 0 = all)"""
        cursor = self._audit_records.find(
            {"entity_kind": entity_kind.value, "entity_id": entity_id}
        ).sort(HISTORY_SORT).skip(skip).limit(limit)

        records = []
        for doc in cursor:
            doc.pop("_id", None)
            records.append(AuditRecord.model_validate(doc))
        return records

    def find_latest(
        self,
        entity_kind: EntityKind,
        entity_id: str,
        session: Optional[ClientSession] = None
    ) -> Optional[AuditRecord]:
        """Get the most recent audit record for an entity"""
        doc = self._audit_records.find_one(
            {"entity_kind": entity_kind.value, "entity_id": entity_id},
            sort=HISTORY_SORT,
            session=session
        )
        if doc:
            doc.pop("_id", None)
            return AuditRecord.model_validate(doc)
        return None

    def count_for_entity(self, entity_kind: EntityKind, entity_id: str) -> int:
        """Count audit records for an entity"""
        return self._audit_records.count_documents(
            {"entity_kind": entity_kind.value, "entity_id": entity_id}
        )
