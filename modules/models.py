# modules/models.py

from dataclasses import dataclass, field
from datetime import datetime

from utils.time_utils import EPOCH, parse_iso, to_iso


@dataclass
class ModRecord:
    """
    A tracked Steam Workshop item. Keyed by its workshop URL in the registry.
    Stored in the mods cache as {"name", "guilds", "lastChecked", "lastModified"}.
    """
    name: str
    guilds: set[str] = field(default_factory=set)
    last_modified: datetime = EPOCH
    last_checked: datetime = EPOCH

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "guilds": sorted(self.guilds),
            "lastChecked": to_iso(self.last_checked),
            "lastModified": to_iso(self.last_modified),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ModRecord":
        return cls(
            name=data.get("name", ""),
            guilds={str(g) for g in data.get("guilds", [])},
            last_modified=parse_iso(data["lastModified"]) if data.get("lastModified") else EPOCH,
            last_checked=parse_iso(data["lastChecked"]) if data.get("lastChecked") else EPOCH,
        )


@dataclass
class NotificationSubscription:
    """Where a guild wants update messages posted and who gets mentioned."""
    channel_ids: list[str] = field(default_factory=list)
    member_ids: list[str] = field(default_factory=list)
    role_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "channelIds": list(self.channel_ids),
            "memberIds": list(self.member_ids),
            "roleIds": list(self.role_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationSubscription":
        return cls(
            channel_ids=[str(i) for i in data.get("channelIds", [])],
            member_ids=[str(i) for i in data.get("memberIds", [])],
            role_ids=[str(i) for i in data.get("roleIds", [])],
        )
