"""
Record validation schemas using Pydantic, checked before anything is persisted.
"""
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from typing import Iterable, List, Optional, Type

from trip.domain.errors import ValidationRejected
from trip.utilities.constants import MAX_NAME_LENGTH, MEAL_TYPES, SHOPPING_CATEGORIES


class PackingItemInput(BaseModel):
    """Schema for packing item validation."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    category: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    isOwned: bool = False
    needsToBuy: bool = False
    isPacked: bool = False
    weight: Optional[float] = Field(None, ge=0)
    assignedGroupId: Optional[str] = None
    isPersonal: bool = False
    notes: Optional[str] = Field(None, max_length=500)
    sourceActivityIds: List[str] = Field(default_factory=list)
    required: bool = False

    @field_validator('name', 'category')
    @classmethod
    def strip_whitespace(cls, v):
        """Reject names that are only whitespace."""
        if not v.strip():
            raise ValueError('must not be blank')
        return v.strip()

    @model_validator(mode='after')
    def check_status(self):
        """An item cannot be owned and still need to be bought."""
        if self.isOwned and self.needsToBuy:
            raise ValueError('isOwned and needsToBuy cannot both be true')
        return self


class MealInput(BaseModel):
    """Schema for meal validation."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    day: int = Field(..., ge=1)
    type: str
    ingredients: List[str] = Field(default_factory=list)
    assignedGroupId: Optional[str] = None
    servings: int = Field(1, ge=1)
    isCustom: bool = False

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        if v not in MEAL_TYPES:
            raise ValueError(f'type must be one of {", ".join(MEAL_TYPES)}')
        return v

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        """Ingredients become shopping item names, so they share the name limit."""
        for name in v:
            if len(name.strip()) > MAX_NAME_LENGTH:
                raise ValueError(f'ingredient names must be at most {MAX_NAME_LENGTH} characters')
        return v


class ShoppingItemInput(BaseModel):
    """Schema for shopping list item validation."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    quantity: int = Field(..., ge=1)
    category: str = Field(..., pattern=rf'^({"|".join(SHOPPING_CATEGORIES)})$')
    isChecked: bool = False
    needsToBuy: bool = True
    isOwned: bool = False
    sourceItemId: Optional[str] = None
    assignedGroupId: Optional[str] = None


class TodoItemInput(BaseModel):
    """Schema for to-do item validation."""
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=500)
    isCompleted: bool = False
    order: int = Field(0, ge=0)


def validate_records(schema: Type[BaseModel], records: Iterable[dict], entity: str) -> None:
    """Validate every record dict against ``schema``.

    Raises:
        ValidationRejected: listing each failing record index and the pydantic errors.
    """
    problems = []
    for index, record in enumerate(records):
        try:
            schema.model_validate(record)
        except ValidationError as e:
            problems.append({'index': index, 'id': record.get('id'), 'errors': e.errors(include_url=False, include_context=False, include_input=False)})
    if problems:
        raise ValidationRejected(f"{len(problems)} invalid {entity} record(s)", details=problems)


__all__ = ['PackingItemInput', 'MealInput', 'ShoppingItemInput', 'TodoItemInput', 'validate_records']
