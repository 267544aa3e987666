from enum import Enum
from typing import Any, Dict, List, Optional, Union
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from utils.json_fields import JsonField, ParsedValue, RawValue


class Language(str, Enum):
    en = "en"
    es = "es"


class LocalizedText(BaseModel):
    en: str = ""
    es: str = ""

    @classmethod
    def from_field(cls, field: Optional[JsonField]) -> "LocalizedText":
        # A plain string reads the same in both languages
        if isinstance(field, RawValue):
            return cls(en=field.text, es=field.text)
        if isinstance(field, ParsedValue):
            value = field.value
            if isinstance(value, dict):
                return cls(en=str(value.get("en") or ""), es=str(value.get("es") or ""))
            if value is not None:
                return cls(en=str(value), es=str(value))
        return cls()

    def get(self, lang: Language) -> str:
        return getattr(self, Language(lang).value)


class AppearanceValues(BaseModel):
    eyes: str = ""
    hair: str = ""
    skin: str = ""


# Stored key -> internal key, per language of the stored record
APPEARANCE_KEYS = {
    Language.en: {"eyes": "eyes", "hair": "hair", "skin": "skin"},
    Language.es: {"ojos": "eyes", "cabello": "hair", "piel": "skin"},
}

APPEARANCE_LABELS = {
    Language.en: {"eyes": "Eyes", "hair": "Hair", "skin": "Skin"},
    Language.es: {"eyes": "Ojos", "hair": "Cabello", "skin": "Piel"},
}


class Appearance(BaseModel):
    """Eyes/hair/skin descriptors under one internal schema for both languages."""
    en: AppearanceValues = Field(default_factory=AppearanceValues)
    es: AppearanceValues = Field(default_factory=AppearanceValues)

    @classmethod
    def from_field(cls, field: Optional[JsonField]) -> "Appearance":
        raw = field.value if isinstance(field, ParsedValue) else None
        if not isinstance(raw, dict):
            return cls()
        result = {}
        for lang in Language:
            block = raw.get(lang.value) or {}
            values = {}
            if isinstance(block, dict):
                # Either naming scheme is accepted under either language
                for mapping in APPEARANCE_KEYS.values():
                    for stored, internal in mapping.items():
                        if block.get(stored) and not values.get(internal):
                            values[internal] = str(block[stored])
            result[lang.value] = AppearanceValues(**values)
        return cls(**result)

    def for_language(self, lang: Language) -> Dict[str, str]:
        """Display labels of `lang` mapped to that language's values."""
        lang = Language(lang)
        values = getattr(self, lang.value)
        labels = APPEARANCE_LABELS[lang]
        return {labels[key]: getattr(values, key) for key in ("eyes", "hair", "skin")}

    def to_record(self) -> dict:
        """Stored shape: English keys under 'en', Spanish keys under 'es'."""
        return {
            "en": {"eyes": self.en.eyes, "hair": self.en.hair, "skin": self.en.skin},
            "es": {"ojos": self.es.eyes, "cabello": self.es.hair, "piel": self.es.skin},
        }


class Socials(BaseModel):
    instagram: Optional[str] = None


class ProfileSummary(BaseModel):
    id: int
    name: str
    primary_image: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileRead(BaseModel):
    id: int
    name: str
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    nationality: LocalizedText = Field(default_factory=LocalizedText)
    immigration_status: LocalizedText = Field(default_factory=LocalizedText)
    appearance: Appearance = Field(default_factory=Appearance)
    socials: Socials = Field(default_factory=Socials)
    primary_image: Optional[str] = None
    video_url: Optional[str] = None

    television: List[dict] = Field(default_factory=list, description="Television credits")
    largometrajes: List[dict] = Field(default_factory=list, description="Feature films")
    cortometrajes: List[dict] = Field(default_factory=list, description="Short films")
    teatro: List[dict] = Field(default_factory=list, description="Theater")
    serie_documental: List[dict] = Field(default_factory=list, description="Documentary series")
    doblaje_voz: List[dict] = Field(default_factory=list, description="Voice dubbing")
    formacion: List[dict] = Field(default_factory=list, description="Training")
    habilidades: List[dict] = Field(default_factory=list, description="Skill groups {category, skills}")

    images: Optional[str] = Field(None, description="Storage folder path")
    created_at: Optional[datetime] = None

    def age(self, today: date) -> Optional[int]:
        if self.birth_date is None:
            return None
        born = self.birth_date
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


class ProfileLocalizedRead(BaseModel):
    """Detail payload with every bilingual field resolved to one language."""
    id: int
    language: Language
    name: str
    birth_date: Optional[date] = None
    age: Optional[int] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    nationality: str = ""
    immigration_status: str = ""
    appearance: Dict[str, str] = Field(default_factory=dict)
    instagram: Optional[str] = None
    primary_image: Optional[str] = None
    video_url: Optional[str] = None
    credits: Dict[str, List[dict]] = Field(default_factory=dict)
    habilidades: List[dict] = Field(default_factory=list)


class ProfileUpsert(BaseModel):
    """
    Whole admin draft. Without `id` the row is created and the identifier
    generated server-side. The storage folder path is not editable here.
    """
    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    birth_date: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    height: Optional[str] = Field(None, max_length=20)
    weight: Optional[str] = Field(None, max_length=20)
    nationality: Optional[Union[str, Dict[str, Any]]] = None
    immigration_status: Optional[Union[str, Dict[str, Any]]] = None
    appearance: Optional[Union[str, Dict[str, Any]]] = None
    socials: Optional[Union[str, Dict[str, Any]]] = None
    primary_image: Optional[str] = None
    video_url: Optional[str] = None

    television: List[dict] = Field(default_factory=list)
    largometrajes: List[dict] = Field(default_factory=list)
    cortometrajes: List[dict] = Field(default_factory=list)
    teatro: List[dict] = Field(default_factory=list)
    serie_documental: List[dict] = Field(default_factory=list)
    doblaje_voz: List[dict] = Field(default_factory=list)
    formacion: List[dict] = Field(default_factory=list)
    habilidades: List[dict] = Field(default_factory=list)

    @field_validator("id", "birth_date", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        # Form inputs submit "" for untouched fields
        if value == "":
            return None
        return value

    @field_validator("height", "weight", mode="before")
    @classmethod
    def _number_as_text(cls, value):
        if value == "":
            return None
        if isinstance(value, (int, float)):
            return str(value)
        return value
