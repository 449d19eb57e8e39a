import logging
from typing import Any, Optional

from sqlalchemy.orm import selectinload

from cutover.models.user import LeaderboardScore, PrivacySettings, User, UserWorkStatus
from cutover.repositories.base import SERVICE, RoutedRepository, Store, as_changes, new_id
from cutover.schemas.profile_schema import Profile
from cutover.translators.profile_translator import profile_translator

logger = logging.getLogger(__name__)

# relationship on the legacy users row -> satellite model
SATELLITES = (
    ("work_status", UserWorkStatus),
    ("privacy", PrivacySettings),
    ("leaderboard", LeaderboardScore),
)


class ProfileRepository(RoutedRepository):
    """Candidate profiles, keyed by the owning candidate id on both backends."""
    family = "profiles"
    stores = (Store(User, "candidate_profiles", profile_translator),)
    owner_field = "candidate_id"
    # the users row itself belongs to candidates
    legacy_tables = ("user_work_status", "privacy_settings", "user_leaderboard_scores")

    def legacy_options(self, store):
        return (
            selectinload(User.work_status),
            selectinload(User.privacy),
            selectinload(User.leaderboard),
        )

    def legacy_scope(self, store):
        return (User.admin_level.is_(None),)

    def _apply_legacy(self, session, obj, payload):
        payload = dict(payload)
        payload.pop("id", None)
        for relation, model in SATELLITES:
            values = payload.pop(relation, None)
            if values is None:
                continue
            related = getattr(obj, relation)
            if related is None:
                related = model(id=new_id(), user_id=obj.id)
                setattr(obj, relation, related)
            for key, value in values.items():
                setattr(related, key, value)
        super()._apply_legacy(session, obj, payload)

    async def _legacy_insert(self, session, store, values):
        # legacy profile columns live on the candidate's own users row
        user = await self._legacy_fetch(session, store, values["candidate_id"])
        if user is None:
            return None
        values = {k: v for k, v in values.items() if k != "created_at"}
        self._apply_legacy(session, user, store.translator.to_legacy_write(values))
        return user

    async def _legacy_remove(self, session, store, obj):
        for relation, _ in SATELLITES:
            related = getattr(obj, relation)
            if related is not None:
                await session.delete(related)

    async def create(self, data: Any) -> Optional[Profile]:
        values = as_changes(data)
        candidate_id = values.get("candidate_id") or values.get("id")
        values.update(id=candidate_id, candidate_id=candidate_id)
        return await super().create(values)

    async def get_for_candidate(self, candidate_id: str) -> Optional[Profile]:
        return await self.get_by_id(candidate_id)

    async def save_for_candidate(self, candidate_id: str, changes: Any, acting_id: str) -> Optional[Profile]:
        """Update the profile, creating it on first write. None if the candidate does not exist."""
        self.ensure_owner(acting_id, candidate_id)
        changes = as_changes(changes)
        existing = await self.get_for_candidate(candidate_id)
        if existing is not None:
            return await self.update(candidate_id, changes)
        if self.route() == SERVICE:
            owner = await self.service.select("candidates", eq={"id": candidate_id}, limit=1)
            if owner:
                logger.info(f"Creating profile for candidate {candidate_id}")
                return await self.create({**changes, "candidate_id": candidate_id})
        return None
