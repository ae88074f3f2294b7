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

from registry_api.models.crate_links import CrateLinks


class EncodableCrate(BaseModel):
    """
    Public representation of a crate.
    """  # noqa: E501

    id: str = Field(description="Crate name used as identifier.")
    name: str = Field(description="Display name.")
    updated_at: datetime = Field(description="Last modification time.")
    versions: Optional[List[int]] = Field(default=None, description="Ids of the crate versions.")
    created_at: datetime = Field(description="Creation time.")
    downloads: int = Field(description="Aggregated download count.")
    max_version: str = Field(description="Highest published version.")
    description: Optional[str] = None
    homepage: Optional[str] = None
    documentation: Optional[str] = None
    keywords: Optional[List[str]] = None
    license: Optional[str] = None
    repository: Optional[str] = None
    links: CrateLinks
    __properties: ClassVar[list[str]] = ["id", "name", "updated_at", "versions", "created_at", "downloads", "max_version", "description", "homepage", "documentation", "keywords", "license", "repository", "links"]

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
