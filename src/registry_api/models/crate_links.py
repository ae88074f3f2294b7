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


class CrateLinks(BaseModel):
    """
    Relative API links of a crate.
    """  # noqa: E501

    version_downloads: str = Field(description="Per-version download history.")
    versions: Optional[str] = Field(default=None, description="Version listing.")
    owners: Optional[str] = Field(default=None, description="Owner listing.")
    reverse_dependencies: str = Field(description="Reverse dependency listing.")
    __properties: ClassVar[list[str]] = ["version_downloads", "versions", "owners", "reverse_dependencies"]

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
