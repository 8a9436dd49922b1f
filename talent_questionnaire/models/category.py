"""Category models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from talent_questionnaire.models.base import CamelInput, CamelModel


class Category(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    target_roles: List[str] = Field(default_factory=list)
    sort_order: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def applies_to(self, role: Optional[str]) -> bool:
        """Empty ``target_roles`` means the category applies to every role."""
        if not role or not self.target_roles:
            return True
        return role in self.target_roles


class CategoryCreate(CamelInput):
    name: str
    slug: str
    description: Optional[str] = None
    target_roles: Optional[List[str]] = None
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(CamelInput):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    target_roles: Optional[List[str]] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryReorder(CamelInput):
    ids: List[int]


__all__ = ["Category", "CategoryCreate", "CategoryUpdate", "CategoryReorder"]
