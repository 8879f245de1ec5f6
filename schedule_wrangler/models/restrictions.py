"""Pydantic data models for per-stop pickup / drop-off restrictions.

A restriction applies to one `(trip_id, stop_id)` pair and is keyed as `"<trip_id>::<stop_id>"`.

!!! example "Overrides document"

    ```json
    {
        "rules": {
            "T1::S2": {"mode": "pickup"},
            "T2::S5": {"mode": "custom", "pickup_stop_ids": ["S1"], "dropoff_stop_ids": ["S9"]}
        }
    }
    ```
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..params import RESTRICTION_KEY_SEP

RestrictionMode = Literal["normal", "pickup", "dropoff", "custom"]
"""
- `normal`: riders may board and alight.
- `pickup`: riders may board but not alight.
- `dropoff`: riders may alight but not board.
- `custom`: the trip is split into two derived trips around this stop when compiled.
"""


class RestrictionRecord(BaseModel):
    """Pickup / drop-off rule for one stop visit of one trip.

    Attributes:
        mode: one of `normal`, `pickup`, `dropoff` or `custom`.
        pickup_stop_ids: advisory list of stops for a `custom` rule. Kept but not compiled.
        dropoff_stop_ids: advisory list of stops for a `custom` rule. Kept but not compiled.

    Any other keys are kept so that documents written by other tools round-trip.
    """

    model_config = ConfigDict(extra="allow")

    mode: RestrictionMode = "normal"
    pickup_stop_ids: Optional[list[str]] = None
    dropoff_stop_ids: Optional[list[str]] = None

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        """Accept modes regardless of case and surrounding whitespace."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class RestrictionDocument(BaseModel):
    """Document holding restriction rules as `{"rules": {"<trip_id>::<stop_id>": {...}}}`."""

    rules: dict[str, Any] = Field(default_factory=dict)


def restriction_key(trip_id: str, stop_id: str) -> str:
    """Key used for a `(trip_id, stop_id)` pair."""
    return f"{trip_id}{RESTRICTION_KEY_SEP}{stop_id}"


def split_restriction_key(key: str) -> Optional[tuple[str, str]]:
    """Split a key into `(trip_id, stop_id)`, or None if it is malformed.

    The first separator splits the key, so a stop_id may itself contain the separator but a
    trip_id can't.
    """
    if not isinstance(key, str) or RESTRICTION_KEY_SEP not in key:
        return None
    trip_id, stop_id = key.split(RESTRICTION_KEY_SEP, 1)
    if not trip_id or not stop_id:
        return None
    return trip_id, stop_id
