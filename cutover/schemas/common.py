from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict


def as_utc(value: datetime) -> datetime:
    """Naive timestamps from the legacy driver are UTC; make them explicit."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CanonicalModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=False)
