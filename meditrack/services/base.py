# meditrack/services/base.py
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

import structlog

from ..compliance_logger import ComplianceLogger, compliance_logger
from ..exceptions import InvalidDataError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class BaseRegistry(Generic[T]):
    """Owns an insertion-ordered list of records keyed by a caller-supplied ``id``.

    Subclasses set ``entity_name`` / ``audit_category`` and decide which of the
    protected mutators they expose.
    """

    entity_name = "record"
    audit_category = "RECORDS"

    def __init__(self, enforce_unique_ids: bool = True, audit: Optional[ComplianceLogger] = None):
        self._records: List[T] = []
        self.enforce_unique_ids = enforce_unique_ids
        self.audit = audit or compliance_logger

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records))

    def get_all(self) -> List[T]:
        return list(self._records)

    def find_by_id(self, record_id: int) -> Optional[T]:
        """First record with this id; later duplicates are only reachable when uniqueness is off."""
        return next((r for r in self._records if r.id == record_id), None)

    def find_by(self, predicate: Callable[[T], bool]) -> List[T]:
        return [r for r in self._records if predicate(r)]

    def exists(self, record_id: int) -> bool:
        return any(r.id == record_id for r in self._records)

    # --- protected mutators ---

    def _ensure_unique_id(self, record_id: int) -> None:
        if self.enforce_unique_ids and self.exists(record_id):
            raise InvalidDataError(f"{self.entity_name.capitalize()} with ID {record_id} already exists")

    def _admit(self, record: T, validate: Callable[[T], None]) -> None:
        """Validate, then append. A rejected record leaves the registry untouched."""
        record_id = getattr(record, "id", None)
        try:
            validate(record)
            self._ensure_unique_id(record_id)
        except InvalidDataError as e:
            logger.warning(f"{self.entity_name}_rejected", record_id=record_id, reason=str(e))
            raise
        self._records.append(record)
        logger.info(f"{self.entity_name}_added", record_id=record_id)
        self.audit.log_event(
            action=f"CREATE_{self.entity_name.upper()}",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=record_id,
        )

    def _remove(self, record_id: int) -> bool:
        before = len(self._records)
        self._records[:] = [r for r in self._records if r.id != record_id]
        removed = len(self._records) != before
        if removed:
            logger.info(f"{self.entity_name}_removed", record_id=record_id)
            self.audit.log_event(
                action=f"DELETE_{self.entity_name.upper()}",
                category=self.audit_category,
                resource_type=self.entity_name,
                resource_id=record_id,
            )
        return removed

    def _replace(self, record_id: int, new_record: T) -> bool:
        """Full replace of every record carrying ``record_id``; positions are kept."""
        if not self.exists(record_id):
            return False
        new_id = getattr(new_record, "id", None)
        if new_id != record_id:
            self._ensure_unique_id(new_id)
        self._records[:] = [new_record if r.id == record_id else r for r in self._records]
        logger.info(f"{self.entity_name}_updated", record_id=record_id, new_record_id=new_id)
        self.audit.log_event(
            action=f"UPDATE_{self.entity_name.upper()}",
            category=self.audit_category,
            resource_type=self.entity_name,
            resource_id=record_id,
        )
        return True
