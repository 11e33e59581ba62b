"""Incidental audit trail for permission administration."""

import logging
from uuid import UUID

audit_logger = logging.getLogger("gatekeeper.audit")


def record(action: str, actor_id: UUID, **fields: object) -> None:
    """Write one audit line; storage and querying live outside this service."""
    details = " ".join(f"{k}={v}" for k, v in fields.items() if v is not None)
    audit_logger.info("%s actor=%s %s", action, actor_id, details)
