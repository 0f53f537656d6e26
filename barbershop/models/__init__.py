from .tables import (
    Base,
    metadata,
    ShopSettings,
    DayOverrides,
    SlotBlocks,
    Customers,
    Appointments,
)

__all__ = [
    "Base",
    "metadata",
    "ShopSettings",
    "DayOverrides",
    "SlotBlocks",
    "Customers",
    "Appointments",
]
