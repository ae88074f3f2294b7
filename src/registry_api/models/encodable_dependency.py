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


class EncodableDependency(BaseModel):
    """
    Dependency of a published version.
    """  # noqa: E501

    id: int
    version_id: int
    crate_id: str = Field(description="Name of the depended-upon crate.")
    req: str
    optional: bool
    default_features: bool
    features: List[str] = Field(default_factory=list)
    target: Optional[str] = None
    kind: str
    __properties: ClassVar[list[str]] = ["id", "version_id", "crate_id", "req", "optional", "default_features", "features", "target", "kind"]

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
