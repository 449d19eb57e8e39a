import logging
from typing import Any, Optional

from cutover.core.errors import ImmutableRecord, IntegrityViolation
from cutover.models.user import User
from cutover.repositories.base import RoutedRepository, Store, as_changes
from cutover.schemas.candidate_schema import Candidate, CandidateCreate, join_names
from cutover.translators.candidate_translator import candidate_translator

logger = logging.getLogger(__name__)


class CandidateRepository(RoutedRepository):
    family = "candidates"
    stores = (Store(User, "candidates", candidate_translator),)
    legacy_tables = ("users",)
    unique_keys = ("email", "username", "slug")

    def legacy_scope(self, store):
        # admins share the legacy users table
        return (User.admin_level.is_(None),)

    def _apply_legacy(self, session, obj, payload):
        super()._apply_legacy(session, obj, payload)
        obj.full_name = join_names(obj.first_name, obj.last_name)

    async def update(self, entity_id: str, data: Any) -> Optional[Candidate]:
        changes = as_changes(data)
        if changes.get("email") is not None:
            current = await self.get_by_id(entity_id)
            if current is None:
                return None
            if changes["email"] != current.email:
                raise ImmutableRecord(f"Candidate {entity_id}: email cannot change once set")
        return await super().update(entity_id, changes)

    async def ensure_for_identity(self, identity_id: str, email: str, first_name: str = "",
                                  last_name: str = "", avatar_url: Optional[str] = None) -> Candidate:
        """Return the candidate for an authenticated identity, creating it on first touch."""
        existing = await self.get_by_id(identity_id)
        if existing is not None:
            return existing
        logger.info(f"Creating candidate for identity {identity_id} on {self.route()}")
        data = CandidateCreate(
            id=identity_id, email=email, first_name=first_name, last_name=last_name, avatar_url=avatar_url
        )
        try:
            return await self.create(data)
        except IntegrityViolation:
            # another request created it first
            existing = await self.get_by_id(identity_id)
            if existing is None:
                raise
            return existing

    async def is_username_available(self, username: str, exclude_id: Optional[str] = None) -> bool:
        found = await self.get_by_unique_key("username", username.strip().lower())
        return found is None or found.id == exclude_id

    async def assign_username(self, candidate_id: str, username: str, acting_id: str) -> Optional[Candidate]:
        self.ensure_owner(acting_id, candidate_id)
        username = username.strip().lower()
        if not await self.is_username_available(username, exclude_id=candidate_id):
            raise IntegrityViolation(self.route(), f"username '{username}' is already taken", code="23505")
        return await self.update(candidate_id, {"username": username})
