from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Union


@dataclass
class FolderNode:
    name: str
    path: str
    created_at: datetime
    modified_by: str
    children: List["Node"] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return True


@dataclass
class FileNode:
    name: str
    path: str
    created_at: datetime
    modified_by: str
    file_type: str
    payload: bytes = b''

    @property
    def is_folder(self) -> bool:
        return False


Node = Union[FolderNode, FileNode]

