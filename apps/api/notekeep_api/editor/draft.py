from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SaveStatus(str, Enum):
    SAVED = "saved"
    UNSAVED = "unsaved"
    SAVING = "saving"


STATUS_LABELS = {
    SaveStatus.SAVED: "All changes saved",
    SaveStatus.UNSAVED: "Unsaved changes",
    SaveStatus.SAVING: "Auto-saving...",
}


def status_label(status: SaveStatus) -> str:
    return STATUS_LABELS.get(status, "")


@dataclass(frozen=True)
class Draft:
    title: str | None = None
    content: str = ""

    def is_empty(self) -> bool:
        return not self.title and not self.content

    def has_content(self) -> bool:
        return bool(self.content.strip())

    def payload(self) -> tuple[str | None, str]:
        """(title, content) as sent to the notes service: trimmed, blank title dropped."""
        title = self.title.strip() if self.title else ""
        return (title or None, self.content.strip())
