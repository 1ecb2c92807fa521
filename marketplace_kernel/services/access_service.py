"""
Service layer for caller identity resolution.

Turns the opaque caller identifier handed over by the outer layer into a
ProfileInfo.  Identity is asserted, not verified: there is no credential
check, only a lookup.
"""

from __future__ import annotations

from uuid import UUID

from marketplace_kernel.domain.dtos import ProfileInfo
from marketplace_kernel.exceptions import ProfileNotFoundError, UnauthenticatedError
from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.services.base import BaseService, coerce_uuid

logger = get_logger("services.access")


class AccessService(BaseService):
    """
    Resolves callers and profiles.

    All public methods return ProfileInfo DTOs, not ORM Profile entities.
    """

    def resolve_caller(self, identifier: object) -> ProfileInfo:
        """
        Map an opaque caller identifier to its profile.

        Args:
            identifier: UUID or UUID string (e.g. a ``profile_id`` header).

        Returns:
            ProfileInfo DTO of the caller.

        Raises:
            UnauthenticatedError: If identifier is missing, malformed, or
                names no profile.
        """
        profile_id = coerce_uuid(identifier)
        profile = self.session.get(Profile, profile_id) if profile_id else None
        if profile is None:
            logger.info("caller_unresolved", extra={"identifier": str(identifier)})
            raise UnauthenticatedError(identifier)
        return ProfileInfo.from_model(profile)

    def get_profile(self, profile_id: UUID) -> ProfileInfo:
        """
        Get a profile by ID.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        profile = self.session.get(Profile, profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        return ProfileInfo.from_model(profile)
