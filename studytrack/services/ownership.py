"""Ownership checks shared by the resource services."""

import logging

from studytrack.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def ensure_owner(owner_id: str, requested_by: str) -> None:
    """Raise `UnauthorizedError` unless *requested_by* is *owner_id*."""
    if owner_id != requested_by:
        logger.warning("User '%s' denied access to resources of '%s'.", requested_by, owner_id)
        raise UnauthorizedError()
