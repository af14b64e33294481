from enum import Enum
from pydantic import BaseModel, Field
from typing import Any

from app.domain.entities.translation import Translation


class Language(str, Enum):
    en = "en"
    es = "es"


class LanguageSchema(BaseModel):
    language: Language


class ResolvedTextSchema(BaseModel):
    language: str
    text: str


class RefreshResponseSchema(BaseModel):
    count: int


class TranslationSchema(BaseModel):
    id: str | None = None
    key: str
    category: str = "general"
    english_text: str
    spanish_text: str | None = None
    context: str | None = None
    is_active: bool = True

    @staticmethod
    def from_entity(translation: Translation) -> "TranslationSchema":
        return TranslationSchema(
            id=translation.id,
            key=translation.key,
            category=translation.category,
            english_text=translation.english_text,
            spanish_text=translation.spanish_text,
            context=translation.context,
            is_active=translation.is_active,
        )


class TranslationCreateSchema(BaseModel):
    key: str = Field(min_length=1)
    category: str = "general"
    english_text: str = Field(min_length=1)
    spanish_text: str | None = None
    context: str | None = None
    is_active: bool = True


class TranslationUpdateSchema(BaseModel):
    key: str | None = None
    category: str | None = None
    english_text: str | None = None
    spanish_text: str | None = None
    context: str | None = None
    is_active: bool | None = None


class ReminderWindowSchema(BaseModel):
    total_hours: float
    is_within_24_hours: bool
    is_within_1_hour: bool


class ReminderLabelSchema(BaseModel):
    text: str
    disabled: bool
    variant: str


class ReminderStatusSchema(BaseModel):
    booking_id: str
    status: str
    window: ReminderWindowSchema
    label: ReminderLabelSchema
    time_remaining: str


class ReminderSentSchema(BaseModel):
    success: bool = True
    booking_id: str
    reminder_type: str
    hours_until_appointment: float
    message: str


class AdminNotificationResultsSchema(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)
