"""Profile records and the session-owned in-memory profile store."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from src.utils.errors import DuplicateProfileError, ProfileNotFoundError

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = ["id", "name", "description", "address", "photo", "interests", "lat", "lng"]


@dataclass(frozen=True, slots=True)
class Location:
    lat: float
    lng: float


@dataclass(slots=True)
class Profile:
    """A directory entry with an optional geocoded location."""

    name: str
    description: str
    address: str
    photo: Optional[str] = None
    interests: List[str] = field(default_factory=list)
    location: Optional[Location] = None
    id: Optional[str] = None

    @classmethod
    def from_input(
        cls,
        data: Mapping[str, Any],
        *,
        canonical_address: Optional[str] = None,
        location: Optional[Location] = None,
    ) -> "Profile":
        """Build a record from a validated form payload and its resolution."""
        photo = data.get("photo") or None
        return cls(
            id=data.get("id") or None,
            name=str(data["name"]).strip(),
            description=str(data["description"]).strip(),
            address=canonical_address or str(data["address"]).strip(),
            photo=photo.strip() if isinstance(photo, str) else photo,
            interests=list(data.get("interests") or []),
            location=location,
        )

    def to_input(self) -> Dict[str, Any]:
        """Return the editable form payload for this profile."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "photo": self.photo or "",
            "interests": list(self.interests),
        }


class ProfileStore:
    """
    Ordered in-memory collection of profiles for one session.

    Insertion order is the default list order. Ids are unique across the
    store; the store assigns one on ``add`` when the profile has none.
    """

    def __init__(self, profiles: Optional[Sequence[Profile]] = None):
        self._profiles: List[Profile] = []
        for profile in profiles or []:
            self.add(profile)

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    def _index_of(self, profile_id: Optional[str]) -> int:
        for i, profile in enumerate(self._profiles):
            if profile.id == profile_id:
                return i
        raise ProfileNotFoundError(str(profile_id))

    def add(self, profile: Profile) -> Profile:
        if profile.id is None:
            profile = replace(profile, id=self._new_id())
            while profile.id in self:
                profile = replace(profile, id=self._new_id())
        elif profile.id in self:
            raise DuplicateProfileError(profile.id)
        self._profiles.append(profile)
        logger.debug(f"Added profile {profile.id} ({len(self._profiles)} total)")
        return profile

    def update(self, profile: Profile) -> Profile:
        index = self._index_of(profile.id)
        self._profiles[index] = profile
        logger.debug(f"Updated profile {profile.id}")
        return profile

    def remove(self, profile_id: str) -> Profile:
        index = self._index_of(profile_id)
        removed = self._profiles.pop(index)
        logger.debug(f"Removed profile {profile_id} ({len(self._profiles)} remaining)")
        return removed

    def get(self, profile_id: Optional[str]) -> Optional[Profile]:
        for profile in self._profiles:
            if profile.id == profile_id:
                return profile
        return None

    def list(self) -> List[Profile]:
        return list(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(list(self._profiles))

    def __contains__(self, profile_id: object) -> bool:
        return any(profile.id == profile_id for profile in self._profiles)


def profiles_to_dataframe(profiles: Sequence[Profile]) -> pd.DataFrame:
    """Flatten profiles into a DataFrame, one row per profile in input order.

    ``lat``/``lng`` are NaN for profiles without a resolved location.
    """
    rows = [
        {
            "id": p.id,
            "name": p.name,
            "description": p.description,
            "address": p.address,
            "photo": p.photo or "",
            "interests": list(p.interests),
            "lat": p.location.lat if p.location else float("nan"),
            "lng": p.location.lng if p.location else float("nan"),
        }
        for p in profiles
    ]
    df = pd.DataFrame(rows, columns=PROFILE_COLUMNS)
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df["lng"] = pd.to_numeric(df["lng"], errors="coerce")
    return df
