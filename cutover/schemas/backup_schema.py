from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class BackupMetadata(BaseModel):
    backup_date: str
    cutoff_date: Optional[str] = None
    tables: List[str]
    record_counts: Dict[str, int]
    errors: Dict[str, str] = Field(default_factory=dict)


class BackupArtifact(BaseModel):
    directory: str
    data_path: str
    metadata_path: str
    data: Dict[str, List[dict]]
    metadata: Optional[BackupMetadata] = None


class RestoreReport(BaseModel):
    order: List[str] = Field(default_factory=list)
    restored: Dict[str, int] = Field(default_factory=dict)
    skipped: List[str] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def total_restored(self) -> int:
        return sum(self.restored.values())
