"""Audit Trail - Append-only log of accepted status changes"""
from typing import List, Optional

from ..domain.models import AuditRecord
from ..domain.enums import EntityKind
from ..repositories.audit_repo import AuditRepository
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditTrail:
    """
    Read/append access to transition audit records

    Records are never updated or deleted. History is returned newest first,
    with the per-entity sequence number breaking equal timestamps so that
    append order is always recoverable.
    """

    def __init__(self, repo: Optional[AuditRepository] = None):
        self.repo = repo or AuditRepository()

    def append(self, record: AuditRecord, session=None) -> AuditRecord:
        """Append one record, inside the caller's transaction when a session is given"""
        return self.repo.insert(record, session=session)

    def history_for(self, entity_kind: EntityKind, entity_id: str) -> List[AuditRecord]:
        """All records of an entity, newest first"""
        records = self.repo.find_for_entity(entity_kind, entity_id)
        return sorted(records, key=lambda r: (r.timestamp, r.sequence), reverse=True)

    def latest_for(self, entity_kind: EntityKind, entity_id: str, session=None) -> Optional[AuditRecord]:
        return self.repo.find_latest(entity_kind, entity_id, session=session)

    def count_for(self, entity_kind: EntityKind, entity_id: str) -> int:
        return self.repo.count_for_entity(entity_kind, entity_id)
