"""
Profile fields are spread over the legacy users row and three satellite rows
(work status, privacy settings, leaderboard score). The hosted backend keeps
them in one candidate_profiles row whose id is the candidate id.
"""
from typing import Any, Dict, Mapping, Optional

from cutover.core.translator import EntityTranslator, Field
from cutover.schemas.profile_schema import DEFAULT_PRIVACY, Profile, default_gamification
from cutover.translators import vocabulary

COMPLETION_FIELDS = (
    "bio",
    "position",
    "birthday",
    "gender",
    "location",
    "work_status",
    "current_position",
    "expected_salary_min",
    "preferred_shift",
    "preferred_work_setup",
)


def completion_percentage(values: Mapping[str, Any]) -> int:
    filled = sum(1 for name in COMPLETION_FIELDS if values.get(name) not in (None, ""))
    return round(100 * filled / len(COMPLETION_FIELDS))


def privacy_from_row(row) -> Optional[Dict[str, str]]:
    if row is None:
        return None
    return {key: getattr(row, key, None) or default for key, default in DEFAULT_PRIVACY.items()}


def privacy_to_row(settings: Optional[Mapping[str, str]]) -> Dict[str, str]:
    merged = dict(DEFAULT_PRIVACY)
    merged.update(settings or {})
    return {key: merged[key] for key in DEFAULT_PRIVACY}


def gamification_from_row(row) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    summary = default_gamification()
    summary.update(
        total_xp=row.overall_score or 0,
        tier=row.tier or summary["tier"],
        rank_position=row.rank_position or 0,
    )
    return summary


def gamification_to_row(summary: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    summary = {**default_gamification(), **(summary or {})}
    return {
        "overall_score": summary["total_xp"],
        "tier": summary["tier"],
        "rank_position": summary["rank_position"],
    }


def mirror_work_status(changes: Mapping[str, Any], payload: Dict[str, Any]) -> None:
    # older readers still look at the original column
    if "work_status" in changes:
        payload.setdefault("work_status", {})["work_status"] = vocabulary.legacy_work_status(
            changes["work_status"]
        )


profile_translator = EntityTranslator(
    "profiles",
    Profile,
    [
        Field("id", required=True),
        Field("candidate_id", legacy="id", required=True),
        Field("bio"),
        Field("position"),
        Field("birthday"),
        Field("gender"),
        Field("gender_custom"),
        # legacy column is NOT NULL with "" meaning unset
        Field("location", read=lambda v: v or None, write=lambda v: v or ""),
        Field("location_city"),
        Field("location_province"),
        Field("location_country"),
        Field("location_region"),
        Field("location_lat"),
        Field("location_lng"),
        Field(
            "work_status",
            legacy="work_status.work_status_new",
            fallback="work_status.work_status",
            read=vocabulary.work_status,
        ),
        Field("current_employer", legacy="work_status.current_employer"),
        Field("current_position", legacy="work_status.current_position"),
        Field("current_salary", legacy="work_status.current_salary"),
        Field("expected_salary_min", legacy="work_status.minimum_salary_range"),
        Field("expected_salary_max", legacy="work_status.maximum_salary_range"),
        Field("notice_period_days", legacy="work_status.notice_period_days"),
        Field("preferred_shift", legacy="work_status.preferred_shift"),
        Field(
            "preferred_work_setup",
            legacy="work_status.work_setup",
            read=vocabulary.work_setup,
            write=vocabulary.legacy_work_setup,
        ),
        Field(
            "privacy_settings",
            legacy="privacy",
            read=privacy_from_row,
            write=privacy_to_row,
            factory=lambda: dict(DEFAULT_PRIVACY),
        ),
        # badges are not kept by the leaderboard table
        Field(
            "gamification",
            legacy="leaderboard",
            read=gamification_from_row,
            write=gamification_to_row,
            factory=default_gamification,
            lossy=True,
        ),
        Field("profile_completed", legacy="completed_data", default=False),
        Field("profile_completion_percentage", legacy=None, default=0),
        Field("created_at"),
        Field("updated_at"),
    ],
    derive={"profile_completion_percentage": completion_percentage},
    legacy_hook=mirror_work_status,
)
