"""Per-stop pickup / drop-off restrictions keyed by `(trip_id, stop_id)`.

Usage:

```python
from schedule_wrangler.restrictions import RestrictionStore

store = RestrictionStore()
store.set("T1", "S2", "pickup")
store.mode_for("T1", "S2")
>> 'pickup'

result = store.merge(overrides_doc, valid_pairs=feed.stop_visit_pairs())
result.added, result.skipped
```

The store never keeps a rule for a pair that isn't in the loaded feed when rules are merged in,
and callers which remove trips or stop times are expected to call `delete_trip` or
`delete_stop_time` so no rule is left dangling.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from pydantic import ValidationError

from .logger import WranglerLogger
from .models.restrictions import (
    RestrictionDocument,
    RestrictionMode,
    RestrictionRecord,
    restriction_key,
    split_restriction_key,
)
from .params import RESTRICTION_KEY_SEP

RuleInput = Union[RestrictionRecord, dict, str]


@dataclass
class MergeResult:
    """Counts from merging an overrides document into a store.

    Attributes:
        added: rules written to the store, including ones replacing an existing rule.
        skipped: rules dropped because their key was malformed, their pair isn't in the feed
            or the rule itself was invalid.
    """

    added: int = 0
    skipped: int = 0


def _to_record(rule: RuleInput) -> RestrictionRecord:
    if isinstance(rule, RestrictionRecord):
        return rule.model_copy(deep=True)
    if isinstance(rule, str):
        return RestrictionRecord(mode=rule)
    return RestrictionRecord.model_validate(rule)


class RestrictionStore:
    """Mapping of `"<trip_id>::<stop_id>"` to a `RestrictionRecord`."""

    def __init__(self, rules: Optional[dict[str, RuleInput]] = None):
        """Create a store, optionally from a `{key: rule}` mapping.

        Raises:
            ValueError: if a key is malformed.
            pydantic.ValidationError: if a rule is invalid.
        """
        self._rules: dict[str, RestrictionRecord] = {}
        for key, rule in (rules or {}).items():
            pair = split_restriction_key(key)
            if pair is None:
                msg = f"Malformed restriction key: {key}"
                WranglerLogger.error(msg)
                raise ValueError(msg)
            self._rules[key] = _to_record(rule)

    def __len__(self) -> int:
        """Number of rules."""
        return len(self._rules)

    def __contains__(self, pair) -> bool:
        """True if there is a rule for a `(trip_id, stop_id)` pair or key."""
        key = restriction_key(*pair) if isinstance(pair, tuple) else pair
        return key in self._rules

    def __iter__(self) -> Iterator[str]:
        """Iterate over keys."""
        return iter(self._rules)

    def __eq__(self, other) -> bool:
        """Stores are equal if they hold the same rules."""
        if not isinstance(other, RestrictionStore):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        """Number of rules."""
        return f"RestrictionStore({len(self)} rules)"

    def keys(self) -> list[str]:
        """Keys of all rules."""
        return list(self._rules.keys())

    def items(self) -> list[tuple[str, RestrictionRecord]]:
        """`(key, rule)` for all rules."""
        return list(self._rules.items())

    def get(self, trip_id: str, stop_id: str) -> Optional[RestrictionRecord]:
        """The rule for a pair, or None."""
        return self._rules.get(restriction_key(trip_id, stop_id))

    def mode_for(self, trip_id: str, stop_id: str) -> RestrictionMode:
        """The mode for a pair, `normal` if there is no rule."""
        rule = self.get(trip_id, stop_id)
        return rule.mode if rule is not None else "normal"

    def set(self, trip_id: str, stop_id: str, rule: RuleInput) -> RestrictionRecord:
        """Set the rule for a pair from a record, a dict or a bare mode string.

        Raises:
            ValueError: if trip_id contains the `::` key separator.
        """
        if RESTRICTION_KEY_SEP in str(trip_id):
            msg = f"trip_id can't contain '{RESTRICTION_KEY_SEP}' to have a restriction: {trip_id}"
            WranglerLogger.error(msg)
            raise ValueError(msg)
        record = _to_record(rule)
        self._rules[restriction_key(trip_id, stop_id)] = record
        return record

    def delete(self, trip_id: str, stop_id: str) -> bool:
        """Remove the rule for a pair. Returns True if there was one."""
        return self._rules.pop(restriction_key(trip_id, stop_id), None) is not None

    def delete_trip(self, trip_id: str) -> int:
        """Remove every rule for a trip. Returns the number removed."""
        keys = [k for k in self._rules if (split_restriction_key(k) or ("", ""))[0] == trip_id]
        for k in keys:
            del self._rules[k]
        if keys:
            WranglerLogger.debug(f"Removed {len(keys)} restrictions for trip {trip_id}.")
        return len(keys)

    def delete_trips(self, trip_ids: Iterable[str]) -> int:
        """Remove every rule for each of trip_ids. Returns the number removed."""
        return sum(self.delete_trip(t) for t in trip_ids)

    def delete_stop_time(self, trip_id: str, stop_id: str) -> int:
        """Remove the rule for the pair of a removed stop time. Returns the number removed."""
        return int(self.delete(trip_id, stop_id))

    def prune(self, valid_pairs: set[tuple[str, str]]) -> int:
        """Remove rules whose pair isn't in valid_pairs. Returns the number removed."""
        orphaned = [k for k in self._rules if split_restriction_key(k) not in valid_pairs]
        for k in orphaned:
            del self._rules[k]
        if orphaned:
            WranglerLogger.info(f"Pruned {len(orphaned)} orphaned restrictions.")
        return len(orphaned)

    def merge(self, document: dict, valid_pairs: set[tuple[str, str]]) -> MergeResult:
        """Merge rules from an overrides document, keeping only pairs in the loaded feed.

        Existing rules for the same pair are replaced.

        Args:
            document: `{"rules": {"<trip_id>::<stop_id>": {"mode": ..., ...}}}`.
            valid_pairs: `(trip_id, stop_id)` pairs in the loaded feed's stop_times.

        Returns:
            MergeResult with the number of rules added and skipped.
        """
        result = MergeResult()
        try:
            rules = RestrictionDocument(**(document or {})).rules
        except (ValidationError, TypeError) as e:
            WranglerLogger.warning(f"Overrides document has no usable rules: {e}")
            return result

        for key, rule in rules.items():
            pair = split_restriction_key(key)
            if pair is None or pair not in valid_pairs:
                WranglerLogger.debug(f"Skipping override for unknown trip/stop: {key}")
                result.skipped += 1
                continue
            try:
                self._rules[key] = _to_record(rule)
            except ValidationError as e:
                WranglerLogger.debug(f"Skipping invalid override {key}: {e}")
                result.skipped += 1
                continue
            result.added += 1

        if result.skipped:
            WranglerLogger.warning(
                f"Skipped {result.skipped} overrides which don't match the loaded feed."
            )
        WranglerLogger.info(f"Merged {result.added} overrides.")
        return result

    def to_dict(self) -> dict:
        """The store as an overrides document `{"rules": {...}}`."""
        return {
            "rules": {
                k: rule.model_dump(exclude_none=True) for k, rule in sorted(self._rules.items())
            }
        }

    @classmethod
    def from_dict(cls, document: dict) -> RestrictionStore:
        """Create a store from an overrides document without checking it against a feed."""
        return cls(RestrictionDocument(**(document or {})).rules)

    def copy(self) -> RestrictionStore:
        """Deep copy of the store."""
        return copy.deepcopy(self)
