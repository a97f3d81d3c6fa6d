"""Domain models for fasting sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel


class FastingProtocol(StrEnum):
    """Intermittent fasting schedule."""

    SIXTEEN_EIGHT = "16:8"
    EIGHTEEN_SIX = "18:6"
    OMAD = "OMAD"
    CUSTOM = "custom"


class FastingStage(StrEnum):
    """Metabolic stage reached during a fast."""

    DIGESTION = "digestion"
    FAT_BURNING = "fatBurning"
    KETOSIS = "ketosis"
    AUTOPHAGY = "autophagy"


@dataclass(frozen=True)
class FastingSession:
    """A running or completed fast."""

    id: UUID
    user_id: UUID
    start_time: datetime
    planned_end_time: datetime
    protocol: FastingProtocol
    current_stage: FastingStage = FastingStage.DIGESTION
    actual_end_time: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.actual_end_time is None


class FastingSessionUpdate(BaseModel):
    """Partial update for the running fast."""

    planned_end_time: AwareDatetime | None = None
    protocol: FastingProtocol | None = None
    current_stage: FastingStage | None = None
