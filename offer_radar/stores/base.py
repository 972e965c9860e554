from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class StoredContent:
    body: str
    version: Optional[str] = None


class ContentStore(ABC):
    """Key-value store addressed by path, guarded by an opaque version token."""

    @abstractmethod
    def get(self, path: str) -> Optional[StoredContent]:
        """回傳指定路徑的內容，不存在時回傳 None"""
        ...

    @abstractmethod
    def put(
        self, path: str, body: str, message: str, version: Optional[str] = None
    ) -> None:
        """建立或覆寫內容；version 存在時作為衝突保護"""
        ...


class RecordSource(ABC):
    """Source of labeled records (e.g. registration issues)."""

    @abstractmethod
    def list_bodies(self, label: str, state: str) -> List[str]:
        """回傳符合 label 與狀態的所有紀錄內文"""
        ...
