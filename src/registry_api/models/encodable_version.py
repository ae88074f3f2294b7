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
from datetime import datetime

from registry_api.models.version_links import VersionLinks


class EncodableVersion(BaseModel):
    """
    Public representation of a crate version.
    """  # noqa: E501

    id: int = Field(description="Version id.")
    crate: str = Field(description="Name of the owning crate.")
    num: str = Field(description="Semantic version.")
    dl_path: str = Field(description="Download endpoint of the archive.")
    updated_at: datetime
    created_at: datetime
    downloads: int
    features: Dict[str, List[str]] = Field(default_factory=dict)
    yanked: bool = Field(description="Whether the version is yanked.")
    checksum: str = Field(description="Lowercase hex SHA-256 of the archive.")
    authors: List[str] = Field(default_factory=list)
    links: VersionLinks
    __properties: ClassVar[list[str]] = ["id", "crate", "num", "dl_path", "updated_at", "created_at", "downloads", "features", "yanked", "checksum", "authors", "links"]

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
