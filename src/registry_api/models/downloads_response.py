# coding: utf-8

"""
    Crate Registry API (v1)
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, List, Optional
try:
    from typing import Self
except ImportError:
    from typing_extensions import Self

from registry_api.models.version_download_record import VersionDownloadRecord


class DownloadsResponse(BaseModel):
    """
    Recent download counters of a crate.
    """  # noqa: E501

    version_downloads: List[VersionDownloadRecord] = Field(default_factory=list)
    __properties: ClassVar[list[str]] = ["version_downloads"]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Self:
        if obj is None:
            return None
        return cls.model_validate(obj)
