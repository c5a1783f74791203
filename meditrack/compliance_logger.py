from datetime import datetime, timezone
from typing import Optional, Any

import structlog

from .models import AuditAction


class ComplianceLogger:
	"""Compliance logger that emits every record mutation as a structured audit event."""

	def __init__(self, institution_id: str = 'MEDITRACK-CLINIC', geo_region: str = 'IN', standard: str = 'HIPAA'):
		self.institution_id = institution_id
		self.geo_region = geo_region
		self.standard = standard
		self.logger = structlog.get_logger('meditrack.compliance')

	@staticmethod
	def normalize_action(action: Optional[str]) -> AuditAction:
		"""Reduce a free-form action name ('CREATE_DOCTOR', 'Paid Bill') to the standard set."""
		action_upper = (action or '').upper()
		if action_upper in AuditAction.__members__:
			return AuditAction[action_upper]
		if action_upper.endswith('_CREATE') or action_upper.startswith('CREATE_'):
			return AuditAction.CREATE
		if action_upper.endswith('_UPDATE') or action_upper.startswith('UPDATE_'):
			return AuditAction.UPDATE
		if action_upper.endswith('_DELETE') or action_upper.startswith('DELETE_'):
			return AuditAction.DELETE
		if 'EXPORT' in action_upper:
			return AuditAction.EXPORT
		if 'PRINT' in action_upper:
			return AuditAction.PRINT
		if 'BULK' in action_upper or 'SEED' in action_upper:
			return AuditAction.BULK_ACTION
		if any(word in action_upper for word in ('BOOK', 'CANCEL', 'PAY', 'ASSIGN', 'COMPLETE')):
			# State transitions that are not strictly create/delete fall back to UPDATE
			return AuditAction.UPDATE
		return AuditAction.READ

	def log_event(
		self,
		action: str,
		category: str,
		details: Optional[str] = None,
		severity: str = 'INFO',
		resource_type: Optional[str] = None,
		resource_id: Optional[int] = None,
		**_: Any
	) -> None:
		"""Emits one audit record. Accepts and ignores extra kwargs."""
		severity = (severity or 'INFO').upper()
		emit = self.logger.warning if severity in ('WARNING', 'ERROR', 'CRITICAL') else self.logger.info
		emit(
			'compliance_event',
			institution_id=self.institution_id,
			geo_region=self.geo_region,
			standard=self.standard,
			action=self.normalize_action(action).value,
			raw_action=action,
			category=category or 'GENERAL',
			severity=severity,
			resource_type=resource_type,
			resource_id=resource_id,
			details=details,
			recorded_at=datetime.now(timezone.utc).isoformat(),
		)


# Default instance used when a registry is not given its own
compliance_logger = ComplianceLogger()
