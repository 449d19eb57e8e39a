from typing import Any, Dict, Optional

from cutover.schemas.common import CanonicalModel, UtcDateTime


class Resume(CanonicalModel):
    id: str
    candidate_id: str
    slug: str
    title: Optional[str] = None
    # either payload may exist without the other
    extracted_data: Optional[Dict[str, Any]] = None
    generated_data: Optional[Dict[str, Any]] = None
    original_filename: Optional[str] = None
    template_used: Optional[str] = None
    is_primary: bool = False
    is_public: bool = False
    view_count: int = 0
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None
