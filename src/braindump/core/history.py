"""Previous brain dumps - pure filtering for the history view."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DumpStatus(Enum):
    """Which stored dumps to show."""

    ALL = "all"
    PROCESSED = "processed"
    UNPROCESSED = "unprocessed"


@dataclass
class BrainDump:
    """A stored brain dump, as the history view sees it."""

    id: str
    raw_content: str
    created_at: datetime | None = None
    processed: bool = False
    ai_analysis_complete: bool = False

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def word_count(self) -> int:
        return len(self.raw_content.split())

    @property
    def char_count(self) -> int:
        return len(self.raw_content)

    @classmethod
    def from_api(cls, data: dict) -> "BrainDump":
        """Create BrainDump from a stored row."""
        created = None
        if data.get("created_at"):
            try:
                created = datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))
            except ValueError:
                created = None
        return cls(
            id=str(data["id"]),
            raw_content=data.get("raw_content") or "",
            created_at=created,
            processed=bool(data.get("processed")),
            ai_analysis_complete=bool(data.get("ai_analysis_complete")),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "raw_content": self.raw_content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "processed": self.processed,
            "ai_analysis_complete": self.ai_analysis_complete,
        }


def filter_dumps(
    dumps: list[BrainDump], search: str = "", status: DumpStatus = DumpStatus.ALL
) -> list[BrainDump]:
    """Dumps whose content contains search (case-insensitive) and match status."""
    needle = search.lower()
    result = []
    for dump in dumps:
        if needle and needle not in dump.raw_content.lower():
            continue
        if status == DumpStatus.PROCESSED and not dump.processed:
            continue
        if status == DumpStatus.UNPROCESSED and dump.processed:
            continue
        result.append(dump)
    return result


def match_dumps(dumps: list[BrainDump], id_prefix: str) -> list[BrainDump]:
    """Dumps whose id starts with id_prefix; an exact id wins outright."""
    exact = [d for d in dumps if d.id == id_prefix]
    if exact:
        return exact
    return [d for d in dumps if id_prefix and d.id.startswith(id_prefix)]
