from typing import Optional

from pydantic import BaseModel, computed_field

from cutover.schemas.common import CanonicalModel, UtcDateTime


def join_names(first_name: Optional[str], last_name: Optional[str]) -> str:
    return " ".join(part.strip() for part in (first_name, last_name) if part and part.strip())


class Candidate(CanonicalModel):
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    username: Optional[str] = None
    slug: Optional[str] = None
    is_active: bool = True
    email_verified: bool = False
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None

    @computed_field
    @property
    def full_name(self) -> str:
        return join_names(self.first_name, self.last_name)


class CandidateCreate(BaseModel):
    id: Optional[str] = None
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    username: Optional[str] = None
    slug: Optional[str] = None


class CandidateUpdate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    username: Optional[str] = None
    slug: Optional[str] = None
    is_active: Optional[bool] = None
