from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class BlobFileStat:
    path: str
    name: str
    mime_type: str = ""
    size_bytes: int = 0
    exists: bool = False


@dataclass(slots=True)
class BlobFile:
    stat: BlobFileStat
    content: bytes

    @property
    def mime_type(self) -> str:
        return self.stat.mime_type
