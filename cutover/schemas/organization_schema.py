from typing import Optional

from cutover.schemas.common import CanonicalModel, UtcDateTime


class Agency(CanonicalModel):
    id: str
    name: str
    slug: str
    logo_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class Company(CanonicalModel):
    id: str
    name: str
    slug: str
    agency_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None
