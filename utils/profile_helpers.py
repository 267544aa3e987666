"""Helpers that turn profile rows into their Pydantic schemas."""
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Callable, List

from models.profile import CREDIT_FIELDS, Profile
from schemas.profile import (
    Appearance,
    Language,
    LocalizedText,
    ProfileLocalizedRead,
    ProfileRead,
    Socials,
)
from utils.json_fields import as_dict, as_list, resolve_json_field


def _profile_read(get: Callable[[str], Any]) -> ProfileRead:
    socials = as_dict(resolve_json_field(get("socials")))
    lists = {
        field: [entry for entry in as_list(resolve_json_field(get(field))) if isinstance(entry, dict)]
        for field in (*CREDIT_FIELDS, "habilidades")
    }
    return ProfileRead(
        id=get("id"),
        name=get("name"),
        birth_date=get("birth_date") or None,
        gender=get("gender"),
        height=get("height"),
        weight=get("weight"),
        nationality=LocalizedText.from_field(resolve_json_field(get("nationality"))),
        immigration_status=LocalizedText.from_field(resolve_json_field(get("immigration_status"))),
        appearance=Appearance.from_field(resolve_json_field(get("appearance"))),
        socials=Socials(instagram=socials.get("instagram") or None),
        primary_image=get("primary_image"),
        video_url=get("video_url"),
        images=get("images"),
        created_at=get("created_at"),
        **lists,
    )


def to_profile_read(profile: Profile) -> ProfileRead:
    """Resolve every legacy JSON-or-string column once into the canonical shape."""
    return _profile_read(lambda field: getattr(profile, field))


def record_to_profile_read(record: Mapping[str, Any]) -> ProfileRead:
    """Same resolution for a raw row as returned by the hosted REST API."""
    return _profile_read(record.get)


def to_profile_reads(profiles: Iterable[Profile]) -> List[ProfileRead]:
    return [to_profile_read(p) for p in profiles]


def to_localized_read(read: ProfileRead, lang: Language, today: date) -> ProfileLocalizedRead:
    """Display-boundary view: one language, translated appearance labels."""
    return ProfileLocalizedRead(
        id=read.id,
        language=lang,
        name=read.name,
        birth_date=read.birth_date,
        age=read.age(today),
        height=read.height,
        weight=read.weight,
        nationality=read.nationality.get(lang),
        immigration_status=read.immigration_status.get(lang),
        appearance=read.appearance.for_language(lang),
        instagram=read.socials.instagram,
        primary_image=read.primary_image,
        video_url=read.video_url,
        credits={field: getattr(read, field) for field in CREDIT_FIELDS},
        habilidades=read.habilidades,
    )
