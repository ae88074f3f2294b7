# coding: utf-8

"""
    Crate Registry API (v1)
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, ClassVar, Dict, List, Literal, Optional
try:
    from typing import Self
except ImportError:
    from typing_extensions import Self


class NewCrateDependency(BaseModel):
    """
    Dependency declared in the metadata block of an upload.
    """  # noqa: E501

    name: str = Field(description="Name of the depended-upon crate.")
    version_req: str = Field(description="Semver requirement the dependency must satisfy.")
    optional: bool = Field(default=False, description="Whether the dependency is optional.")
    default_features: bool = Field(default=True, description="Whether default features are enabled.")
    features: List[str] = Field(default_factory=list, description="Features enabled on the dependency.")
    target: Optional[str] = Field(default=None, description="Target platform restricting the dependency.")
    kind: Optional[Literal["normal", "build", "dev"]] = Field(default=None, description="Dependency kind.")
    __properties: ClassVar[list[str]] = ["name", "version_req", "optional", "default_features", "features", "target", "kind"]

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
        "protected_namespaces": (),
    }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> Self:
        if obj is None:
            return None
        return cls.model_validate(obj)
