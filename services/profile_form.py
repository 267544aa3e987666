"""
Admin editor draft of a profile and its upsert.

A ProfileDraft never mutates a structure it has handed out: every operation
builds new dicts/lists along the changed path and swaps the state, so a
snapshot taken earlier keeps showing the earlier values.
"""
import copy
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import CREDIT_FIELDS, Profile
from schemas.profile import Appearance, AppearanceValues, Language, ProfileRead, ProfileUpsert
from utils.profile_helpers import record_to_profile_read

logger = logging.getLogger("uvicorn.error")

LIST_FIELDS = (*CREDIT_FIELDS, "habilidades")
SCALAR_FIELDS = (
    "name",
    "birth_date",
    "gender",
    "height",
    "weight",
    "primary_image",
    "video_url",
)
LOCALIZED_TEXT_FIELDS = ("nationality", "immigration_status")

# Spanish subfield names accepted by update_localized("appearance", ...)
_APPEARANCE_ALIASES = {"ojos": "eyes", "cabello": "hair", "piel": "skin"}


def _empty_state() -> dict:
    return {
        "id": "",
        "name": "",
        "birth_date": "",
        "gender": "",
        "height": "",
        "weight": "",
        "primary_image": "",
        "video_url": "",
        "appearance": {lang.value: AppearanceValues().model_dump() for lang in Language},
        "nationality": {"en": "", "es": ""},
        "immigration_status": {"en": "", "es": ""},
        "socials": {"instagram": ""},
        **{field: [] for field in LIST_FIELDS},
    }


class ProfileDraft:

    def __init__(self, state: Optional[dict] = None):
        # The draft owns its state; a caller keeps no handle into it
        self._state = copy.deepcopy(state) if state is not None else _empty_state()

    @classmethod
    def empty(cls) -> "ProfileDraft":
        return cls()

    @classmethod
    def from_profile(cls, profile: ProfileRead) -> "ProfileDraft":
        state = _empty_state()
        state.update(
            id=profile.id,
            name=profile.name,
            birth_date=profile.birth_date.isoformat() if profile.birth_date else "",
            gender=profile.gender or "",
            height=profile.height or "",
            weight=profile.weight or "",
            primary_image=profile.primary_image or "",
            video_url=profile.video_url or "",
            appearance=profile.appearance.model_dump(),
            nationality=profile.nationality.model_dump(),
            immigration_status=profile.immigration_status.model_dump(),
            socials={"instagram": profile.socials.instagram or ""},
        )
        for field in LIST_FIELDS:
            state[field] = [dict(entry) for entry in getattr(profile, field)]
        return cls(state)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ProfileDraft":
        """Seed from a raw row; legacy JSON-string columns are resolved first."""
        return cls.from_profile(record_to_profile_read(record))

    def snapshot(self) -> dict:
        """A copy of the current state; editing it leaves the draft unchanged."""
        return copy.deepcopy(self._state)

    @property
    def is_new(self) -> bool:
        return not self._state.get("id")

    def update_field(self, name: str, value: Any) -> None:
        if name not in SCALAR_FIELDS:
            raise KeyError(f"Not a scalar field: {name}")
        self._state = {**self._state, name: value}

    def update_instagram(self, handle: str) -> None:
        self._state = {**self._state, "socials": {**self._state["socials"], "instagram": handle}}

    def update_localized(self, field: str, lang: str, subfield: Optional[str], value: str) -> None:
        """field x language x subfield; text fields (nationality, ...) take no subfield."""
        lang = Language(lang).value
        current = self._state.get(field)
        if field == "appearance":
            key = _APPEARANCE_ALIASES.get(subfield, subfield)
            if key not in ("eyes", "hair", "skin"):
                raise KeyError(f"Unknown appearance subfield: {subfield}")
            block = {**current[lang], key: value}
            self._state = {**self._state, field: {**current, lang: block}}
        elif field in LOCALIZED_TEXT_FIELDS:
            self._state = {**self._state, field: {**current, lang: value}}
        else:
            raise KeyError(f"Not a localized field: {field}")

    def _list(self, field: str) -> list:
        if field not in LIST_FIELDS:
            raise KeyError(f"Not a list field: {field}")
        return self._state[field]

    def add_entry(self, field: str) -> None:
        self._state = {**self._state, field: [*self._list(field), {}]}

    def update_entry(self, field: str, index: int, key: str, value: Any) -> None:
        entries = list(self._list(field))
        while len(entries) <= index:
            entries.append({})
        entries[index] = {**entries[index], key: value}
        self._state = {**self._state, field: entries}

    def remove_entry(self, field: str, index: int) -> None:
        entries = [entry for i, entry in enumerate(self._list(field)) if i != index]
        self._state = {**self._state, field: entries}

    def to_payload(self) -> dict:
        """
        Upsert payload. An unset identifier is left out entirely so the
        backend assigns one; an empty string is never sent as an id.
        """
        state = self._state
        payload = {
            key: value
            for key, value in state.items()
            if key not in ("id", "appearance")
        }
        if state.get("id"):
            payload["id"] = state["id"]
        payload["appearance"] = Appearance(**state["appearance"]).to_record()
        if not state["socials"].get("instagram"):
            payload["socials"] = {}
        return payload


async def upsert_profile(db: AsyncSession, data: ProfileUpsert) -> Profile:
    """Insert-or-update keyed by id. Columns absent from the payload are kept."""
    values = data.model_dump(exclude={"id"}, exclude_unset=True)

    profile = await db.get(Profile, data.id) if data.id is not None else None
    if profile is None:
        profile = Profile(id=data.id, **values)
        db.add(profile)
    else:
        for key, value in values.items():
            setattr(profile, key, value)

    await db.commit()
    await db.refresh(profile)
    logger.info("Profile %s saved", profile.id)
    return profile


async def save_draft(db: AsyncSession, draft: ProfileDraft) -> Profile:
    """
    Sends the whole draft as one upsert. After creating a profile the caller
    re-fetches the list to pick up the generated id; the draft stays unaware of it.
    """
    return await upsert_profile(db, ProfileUpsert(**draft.to_payload()))
