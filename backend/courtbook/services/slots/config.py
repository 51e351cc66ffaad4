# backend/courtbook/services/slots/config.py
"""
Court configuration for the slot calendar.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from ...config import Settings

SLOT_STEP_MINUTES = 30


@dataclass(frozen=True)
class CourtConfig:
    """
    Operating window and pricing of the court.

    Attributes:
        open_hour: First bookable hour (inclusive), 0-23
        close_hour: Closing hour (exclusive), 1-24
        price_per_block: Price of one 30-minute block
        currency: Currency code shown in quotes
    """
    open_hour: int = 8
    close_hour: int = 22
    price_per_block: Decimal = Decimal("67.50")
    currency: str = "BRL"
    slots: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate configuration and freeze the slot calendar."""
        if not 0 <= self.open_hour <= 23:
            raise ValueError(f"open_hour must be within 0..23, got {self.open_hour}")
        if not self.open_hour < self.close_hour <= 24:
            raise ValueError(
                f"close_hour must be within {self.open_hour + 1}..24, got {self.close_hour}"
            )
        if self.price_per_block <= 0:
            raise ValueError(f"price_per_block must be positive, got {self.price_per_block}")

        from .calendar import generate_slots
        object.__setattr__(self, "slots", tuple(generate_slots(self.open_hour, self.close_hour)))

    @classmethod
    def from_settings(cls, settings: Settings) -> "CourtConfig":
        return cls(
            open_hour=settings.court_open_hour,
            close_hour=settings.court_close_hour,
            price_per_block=settings.price_per_block,
            currency=settings.currency,
        )

    @property
    def slots_per_day(self) -> int:
        """Two blocks per operating hour."""
        return len(self.slots)

    def is_slot(self, label: str) -> bool:
        return label in self.slots


def time_str_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = time_str.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
