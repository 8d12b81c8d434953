"""Departure domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DepartureRecord:
    """A single train departure as reported by the source page."""

    destination: str
    time: str  # Display form, e.g. "11:27 PM"
    status: str  # Source-provided status text, e.g. "in 7 mins" or "On Time"
    scheduled_time: str  # Absolute timestamp string, e.g. "8/2/2025 11:27:00 PM"

    def to_dict(self) -> dict[str, str]:
        """Serialize using the field names API clients already consume."""
        return {
            "destination": self.destination,
            "time": self.time,
            "status": self.status,
            "scheduledTime": self.scheduled_time,
        }
