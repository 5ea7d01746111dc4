"""Stored brain dump interface."""

from typing import Protocol

from braindump.core.history import BrainDump


class DumpHistory(Protocol):
    """Interface for reading and editing previously submitted dumps."""

    def list_dumps(self) -> list[BrainDump]:
        """The signed-in user's dumps, newest first."""
        ...

    def update_dump(self, dump_id: str, raw_content: str) -> BrainDump:
        """Replace a dump's text and return the stored row."""
        ...

    def delete_dump(self, dump_id: str) -> None:
        ...
