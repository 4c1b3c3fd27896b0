"""Search, interest, location filtering and sorting over profile lists.

The pipeline runs over a DataFrame built from the profiles so each stage is a
boolean mask; the surviving row labels are then mapped back to the original
``Profile`` objects, so callers always receive the same instances they passed in.
"""

import logging
import unicodedata
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from src.utils.performance import monitor_performance
from src.utils.profiles import Profile, profiles_to_dataframe

logger = logging.getLogger(__name__)


class SortKey(Enum):
    NONE = "none"
    NAME = "name"
    LOCATION = "location"


# Column each sort key orders by
_SORT_COLUMNS = {SortKey.NAME: "name", SortKey.LOCATION: "address"}


@dataclass(frozen=True)
class FilterCriteria:
    """User-chosen constraints for the profile list view."""

    search_text: str = ""
    selected_interests: Tuple[str, ...] = ()
    location: str = ""
    sort_by: SortKey = SortKey.NONE

    def with_changes(self, **changes) -> "FilterCriteria":
        if "selected_interests" in changes:
            changes["selected_interests"] = tuple(changes["selected_interests"] or ())
        if "sort_by" in changes and not isinstance(changes["sort_by"], SortKey):
            changes["sort_by"] = SortKey(changes["sort_by"])
        return replace(self, **changes)


def clear_filters() -> FilterCriteria:
    """Criteria the filter panel resets to: nothing selected, sorted by name."""
    return FilterCriteria(sort_by=SortKey.NAME)


def collation_key(text: str) -> Tuple[str, str, str]:
    """Sort key approximating locale-aware ordering.

    Compares accent-stripped casefolded text first, then casefolded text, then
    the case-swapped original so lowercase sorts before uppercase on ties.
    """
    text = text or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, text.casefold(), text.swapcase()


def _contains(series: pd.Series, needle: str) -> pd.Series:
    return series.fillna("").astype(str).str.lower().str.contains(needle.lower(), regex=False)


@monitor_performance(slow_threshold=0.2)
def apply_filters(profiles: Sequence[Profile], criteria: FilterCriteria) -> List[Profile]:
    """Derive the filtered, sorted view of ``profiles``.

    Stages run in order: free-text search over name/description, interest
    match (any selected tag), location substring on address, then a stable
    sort. The input sequence is never modified.

    Args:
        profiles: Profiles in store order
        criteria: Active filter criteria

    Returns:
        New list holding the matching profiles
    """
    if not profiles:
        return []

    df = profiles_to_dataframe(profiles)

    if criteria.search_text:
        df = df[_contains(df["name"], criteria.search_text) | _contains(df["description"], criteria.search_text)]

    if criteria.selected_interests:
        selected = set(criteria.selected_interests)
        mask = df["interests"].apply(lambda tags: any(tag in selected for tag in tags))
        df = df[mask.astype(bool)]

    if criteria.location:
        df = df[_contains(df["address"], criteria.location)]

    sort_column = _SORT_COLUMNS.get(criteria.sort_by)
    if sort_column and not df.empty:
        values = df[sort_column].fillna("").astype(str)
        df = df.assign(
            _primary=values.map(lambda v: collation_key(v)[0]),
            _secondary=values.map(lambda v: collation_key(v)[1]),
            _tertiary=values.map(lambda v: collation_key(v)[2]),
        ).sort_values(by=["_primary", "_secondary", "_tertiary"], kind="stable")

    logger.debug(f"Filtered view: {len(df)} of {len(profiles)} profiles")
    return [profiles[i] for i in df.index]


def get_unique_interests(profiles: Iterable[Profile]) -> List[str]:
    """Return every distinct interest tag across ``profiles``, sorted."""
    unique_interests = set()
    for profile in profiles:
        unique_interests.update(tag for tag in profile.interests if tag)
    return sorted(unique_interests, key=collation_key)


def get_unique_locations(profiles: Iterable[Profile]) -> List[str]:
    """Return distinct addresses in first-seen order."""
    return list(dict.fromkeys(profile.address for profile in profiles if profile.address))


def active_filter_count(criteria: FilterCriteria) -> int:
    """Badge count shown on the filter toggle: selected interests plus the location filter."""
    return len(criteria.selected_interests) + (1 if criteria.location else 0)


def has_active_filters(criteria: FilterCriteria) -> bool:
    return bool(criteria.selected_interests or criteria.location or criteria.search_text)
