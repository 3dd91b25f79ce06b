"""Instagram API models.

Typed views of the user and media payloads returned by the photo network.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InstagramProfile:
    """Profile of a photo network user.

    Attributes:
        id: Numeric user identity
        username: Account name
        full_name: Display name
        profile_picture: Avatar URL
        bio: Profile text
        website: Linked website
        counts: Media/follower counters as reported by the API
    """

    id: int
    username: str
    full_name: str = ""
    profile_picture: str = ""
    bio: str = ""
    website: str = ""
    counts: dict[str, int] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> InstagramProfile:
        """Build a profile from the ``data`` object of a user response.

        Raises:
            KeyError: If ``id`` or ``username`` is missing
            ValueError: If ``id`` is not numeric
        """
        return cls(
            id=int(data["id"]),
            username=str(data["username"]),
            full_name=data.get("full_name") or "",
            profile_picture=data.get("profile_picture") or "",
            bio=data.get("bio") or "",
            website=data.get("website") or "",
            counts=dict(data.get("counts") or {}),
        )


@dataclass
class MediaFeed:
    """One page of a user's recent media.

    Attributes:
        items: Raw media objects, newest first
        next_max_id: Cursor for the following page, None on the last page
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    next_max_id: str | None = None

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return self.next_max_id is not None
