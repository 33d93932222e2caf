"""Pydantic schemas for books, categories and readers.

Response models tolerate the backend's camelCase keys and Mongo-style
`_id`. Create/Update schemas carry the form validation rules and dump
themselves to request payloads with `to_payload()`.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("is required")
    return v


class CatalogModel(BaseModel):
    """Base for backend entities."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict:
        """Request body with backend field names, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# Categories
# ============================================================================


class Category(CatalogModel):
    """A book category."""

    id: str = Field(..., alias="_id")
    name: str
    description: Optional[str] = None


class CategoryCreate(CatalogModel):
    """Schema for creating a category."""

    name: str = Field(..., max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _strip_required(v)


class CategoryUpdate(CatalogModel):
    """Schema for updating a category."""

    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


# ============================================================================
# Books
# ============================================================================


class Book(CatalogModel):
    """A book title with its copy counts."""

    id: str = Field(..., alias="_id")
    title: str
    author: Optional[str] = None
    isbn: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    total_copies: int = Field(0, alias="totalCopies")
    available_copies: int = Field(0, alias="availableCopies")

    @model_validator(mode="before")
    @classmethod
    def split_category(cls, data: Any) -> Any:
        """Accept `category` as a bare id or a populated {_id, name}."""
        if isinstance(data, dict) and "category" in data:
            data = dict(data)
            category = data.pop("category")
            if isinstance(category, dict):
                data.setdefault("category_id", category.get("_id") or category.get("id"))
                data.setdefault("category_name", category.get("name"))
            elif category:
                data.setdefault("category_id", str(category))
        return data

    @property
    def is_available(self) -> bool:
        return self.available_copies > 0


class BookCreate(CatalogModel):
    """Schema for creating a book."""

    title: str
    author: str
    isbn: str = Field(..., max_length=17)
    category: str = Field(..., description="Category ID")
    total_copies: int = Field(1, ge=1, alias="totalCopies")
    available_copies: Optional[int] = Field(None, ge=0, alias="availableCopies")

    @field_validator("title", "author", "isbn", "category")
    @classmethod
    def required_text(cls, v: str) -> str:
        return _strip_required(v)

    @model_validator(mode="after")
    def default_available(self) -> "BookCreate":
        """New books start with every copy available."""
        if self.available_copies is None:
            self.available_copies = self.total_copies
        elif self.available_copies > self.total_copies:
            raise ValueError("available copies cannot exceed total copies")
        return self


class BookUpdate(CatalogModel):
    """Schema for updating a book."""

    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = Field(None, max_length=17)
    category: Optional[str] = None
    total_copies: Optional[int] = Field(None, ge=1, alias="totalCopies")
    available_copies: Optional[int] = Field(None, ge=0, alias="availableCopies")

    @field_validator("title", "author", "isbn", "category")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


# ============================================================================
# Readers
# ============================================================================


class Reader(CatalogModel):
    """A library patron."""

    id: str = Field(..., alias="_id")
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def phone_as_text(cls, v):
        return str(v) if v is not None else v

    @property
    def email_domain(self) -> Optional[str]:
        parts = (self.email or "").split("@")
        return parts[1] if len(parts) == 2 and parts[1] else None


class ReaderCreate(CatalogModel):
    """Schema for creating a reader."""

    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=200)
    phone: str = Field(..., max_length=50)
    address: Optional[str] = None

    @field_validator("name", "email", "phone")
    @classmethod
    def required_text(cls, v: str) -> str:
        return _strip_required(v)


class ReaderUpdate(CatalogModel):
    """Schema for updating a reader."""

    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None

    @field_validator("name", "email", "phone")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v
