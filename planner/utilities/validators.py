"""
Input validation schemas using Pydantic for the planner API.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from planner.utilities.constants import HABIT_FREQUENCIES, WATER_MAX, DEFAULT_HABIT_COLOR


class TextInput(BaseModel):
    """Free-text field update (notes, schedule cell, meal)."""
    text: str = Field(default="", max_length=10000)


class TopThreeUpdate(BaseModel):
    text: Optional[str] = Field(default=None, max_length=1000)
    done: Optional[bool] = None


class TodoInput(BaseModel):
    """Schema for a new to-do item."""
    text: str = Field(..., min_length=1, max_length=1000)

    @field_validator('text')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace and refuse blank items."""
        v = v.strip()
        if not v:
            raise ValueError('Todo text cannot be empty')
        return v


class TodoUpdate(BaseModel):
    text: Optional[str] = Field(default=None, max_length=1000)
    done: Optional[bool] = None


class TodoMove(BaseModel):
    """Drag-and-drop move of one todo from a position to another."""
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class WaterInput(BaseModel):
    count: int = Field(..., ge=0, le=WATER_MAX)


class HabitInput(BaseModel):
    """Schema for habit creation."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    color: str = Field(default=DEFAULT_HABIT_COLOR, max_length=32)
    repeat: bool = False
    reminder: bool = False
    goal: bool = False
    frequency: str = Field(default="daily")
    days: List[int] = Field(default_factory=list)

    @field_validator('title', 'description')
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v:
            raise ValueError('Please enter a habit title')
        return v

    @field_validator('frequency')
    @classmethod
    def validate_frequency(cls, v):
        if v not in HABIT_FREQUENCIES:
            raise ValueError(f"Frequency must be one of {', '.join(HABIT_FREQUENCIES)}")
        return v

    @field_validator('days')
    @classmethod
    def validate_days(cls, v):
        """Weekday numbers, 0 = Sunday .. 6 = Saturday."""
        for day in v:
            if day < 0 or day > 6:
                raise ValueError(f'Invalid weekday: {day}')
        return sorted(set(v))


class SessionInput(BaseModel):
    """Sign-in payload establishing the remote session."""
    uid: str = Field(..., min_length=1, max_length=128)
    email: str = Field(default="", max_length=320)
    display_name: str = Field(default="", max_length=200)
    provider: str = Field(default="anonymous", max_length=64)
