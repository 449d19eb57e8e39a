from typing import Any, FrozenSet, List, Optional

from pydantic import BaseModel, Field


class FieldDiff(BaseModel):
    field: str
    legacy: Any = None
    service: Any = None


class DiffReport(BaseModel):
    family: str
    entity_id: str
    legacy_found: bool
    service_found: bool
    differences: List[FieldDiff] = Field(default_factory=list)
    ignored: FrozenSet[str] = frozenset()
    # set when the row exists but no longer fits the canonical shape
    legacy_error: Optional[str] = None
    service_error: Optional[str] = None

    @property
    def is_consistent(self) -> bool:
        if self.legacy_error or self.service_error:
            return False
        return self.legacy_found == self.service_found and not self.differences
