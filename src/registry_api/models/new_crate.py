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

from registry_api.models.new_crate_dependency import NewCrateDependency


class NewCrate(BaseModel):
    """
    Metadata block that precedes the archive in a publish request.
    """  # noqa: E501

    name: str = Field(description="Crate name as written in the manifest.")
    vers: str = Field(description="Semantic version being published.")
    deps: List[NewCrateDependency] = Field(default_factory=list, description="Declared dependencies.")
    features: Dict[str, List[str]] = Field(default_factory=dict, description="Feature map.")
    authors: List[str] = Field(default_factory=list, description="Crate authors.")
    description: Optional[str] = Field(default=None, description="Short description.")
    homepage: Optional[str] = Field(default=None, description="Homepage URL.")
    documentation: Optional[str] = Field(default=None, description="Documentation URL.")
    readme: Optional[str] = Field(default=None, description="README contents.")
    keywords: List[str] = Field(default_factory=list, description="Search keywords.")
    license: Optional[str] = Field(default=None, description="SPDX license expression.")
    license_file: Optional[str] = Field(default=None, description="Path of a non-standard license file.")
    repository: Optional[str] = Field(default=None, description="Source repository URL.")
    __properties: ClassVar[list[str]] = [
        "name", "vers", "deps", "features", "authors", "description", "homepage",
        "documentation", "readme", "keywords", "license", "license_file", "repository",
    ]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_json(cls, json_str: str | bytes) -> Self:
        return cls.model_validate_json(json_str)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Self:
        if obj is None:
            return None
        return cls.model_validate(obj)
