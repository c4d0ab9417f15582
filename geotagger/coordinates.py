"""Coordinate value type shared by the reader, writer and shell."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Coordinate:
    """Signed decimal degrees. Range checking is left to the caller."""

    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Coordinate":
        """Build from the shell's `{"lat": .., "lng": ..}` shape."""
        return cls(latitude=float(data["lat"]), longitude=float(data["lng"]))
