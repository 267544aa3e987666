from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile

ADULT_AGE = 18

# Gender values the public sections filter on
MALE = "Male"
FEMALE = "Female"


class Section(str, Enum):
    actors = "actors"
    actresses = "actresses"
    young_actors = "young_actors"


def age_cutoff(today: Optional[date] = None, years: int = ADULT_AGE) -> date:
    """
    Birth date of someone turning `years` today. Computed per request from
    the UTC date, so results shift at midnight UTC. A Feb 29 that doesn't
    exist in the target year rolls over to Mar 1.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return date(today.year - years, 3, 1)


def section_filters(section: Section, cutoff: date) -> list:
    if section is Section.actors:
        return [Profile.birth_date <= cutoff, Profile.gender == MALE]
    if section is Section.actresses:
        return [Profile.birth_date <= cutoff, Profile.gender == FEMALE]
    return [Profile.birth_date > cutoff]


async def list_section_profiles(
    db: AsyncSession,
    section: Section,
    today: Optional[date] = None,
) -> List[Profile]:
    cutoff = age_cutoff(today)
    stmt = (
        select(Profile)
        .where(*section_filters(Section(section), cutoff))
        .order_by(Profile.name.asc(), Profile.id.asc())
    )
    return list((await db.execute(stmt)).scalars().all())


async def list_all_profiles(db: AsyncSession) -> List[Profile]:
    stmt = select(Profile).order_by(Profile.name.asc(), Profile.id.asc())
    return list((await db.execute(stmt)).scalars().all())


async def get_profile(db: AsyncSession, profile_id: int) -> Optional[Profile]:
    return await db.get(Profile, profile_id)


async def list_poster_images(db: AsyncSession) -> List[str]:
    """Non-empty primary images of every profile, for the home page carousel."""
    stmt = (
        select(Profile.primary_image)
        .where(Profile.primary_image.is_not(None), Profile.primary_image != "")
        .order_by(Profile.name.asc(), Profile.id.asc())
    )
    return list((await db.execute(stmt)).scalars().all())
