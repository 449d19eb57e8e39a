"""Enum vocabularies that differ between the legacy and hosted schemas."""
from typing import Any, Optional

from cutover.core.translator import mapper
from cutover.schemas.application_schema import ApplicationStatus

WORK_STATUS = {
    "unemployed-looking-for-work": "unemployed",
    "part-time": "part_time",
    "unemployed": "unemployed",
    "part_time": "part_time",
    "employed": "employed",
    "freelancer": "freelancer",
    "student": "student",
}
LEGACY_WORK_STATUS = {"unemployed": "unemployed-looking-for-work", "part_time": "part-time"}

WORK_SETUP = {
    "Work From Office": "office",
    "Work From Home": "remote",
    "Hybrid": "hybrid",
    "Any": "any",
}
LEGACY_WORK_SETUP = {v: k for k, v in WORK_SETUP.items()}

WORK_TYPE = {
    "full-time": "full_time",
    "part-time": "part_time",
    "full_time": "full_time",
    "part_time": "part_time",
    "contract": "contract",
    "internship": "internship",
}
LEGACY_WORK_TYPE = {"full_time": "full-time", "part_time": "part-time"}

APPLICATION_STATUS = {
    "submitted": ApplicationStatus.SUBMITTED,
    "qualified": ApplicationStatus.UNDER_REVIEW,
    "for verification": ApplicationStatus.UNDER_REVIEW,
    "verified": ApplicationStatus.UNDER_REVIEW,
    "initial interview": ApplicationStatus.UNDER_REVIEW,
    "final interview": ApplicationStatus.UNDER_REVIEW,
    "under_review": ApplicationStatus.UNDER_REVIEW,
    "passed": ApplicationStatus.OFFERED,
    "offered": ApplicationStatus.OFFERED,
    "not qualified": ApplicationStatus.REJECTED,
    "failed": ApplicationStatus.REJECTED,
    "rejected": ApplicationStatus.REJECTED,
    "closed": ApplicationStatus.REJECTED,
    "withdrawn": ApplicationStatus.WITHDRAWN,
    "hired": ApplicationStatus.HIRED,
}
LEGACY_APPLICATION_STATUS = {
    ApplicationStatus.UNDER_REVIEW.value: "for verification",
    ApplicationStatus.OFFERED.value: "passed",
}

work_status = mapper(WORK_STATUS, fallback="unemployed")
work_setup = mapper(WORK_SETUP)
work_type = mapper(WORK_TYPE, fallback="full_time")


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


def application_status(value: Optional[str]) -> Optional[ApplicationStatus]:
    if value is None or value == "":
        return None
    return APPLICATION_STATUS.get(value.strip().lower(), ApplicationStatus.SUBMITTED)


def legacy_application_status(value: Any) -> Optional[str]:
    value = _plain(value)
    if value is None:
        return None
    return LEGACY_APPLICATION_STATUS.get(value, value)


def legacy_work_status(value: Optional[str]) -> Optional[str]:
    return None if value is None else LEGACY_WORK_STATUS.get(value, value)


def legacy_work_setup(value: Optional[str]) -> Optional[str]:
    return None if value is None else LEGACY_WORK_SETUP.get(value, value)


def legacy_work_type(value: Optional[str]) -> Optional[str]:
    return None if value is None else LEGACY_WORK_TYPE.get(value, value)
