from sqlalchemy import Column, BigInteger, String, Date, Text, JSON

from .base import Base, CreatedAtMixin

# Credit lists, each an ordered JSON array of free-form entries
CREDIT_FIELDS = (
    "television",
    "largometrajes",
    "cortometrajes",
    "teatro",
    "serie_documental",
    "doblaje_voz",
    "formacion",
)

# Columns that legacy rows may hold as JSON-encoded strings
JSON_FIELDS = (
    "appearance",
    "nationality",
    "immigration_status",
    "socials",
    *CREDIT_FIELDS,
    "habilidades",
)


class Profile(CreatedAtMixin, Base):
    __tablename__ = "profile"

    id = Column(BigInteger, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    birth_date = Column(Date, nullable=True, index=True)
    gender = Column(String(20), nullable=True)
    height = Column(String(20), nullable=True)
    weight = Column(String(20), nullable=True)

    nationality = Column(JSON, nullable=True)
    immigration_status = Column(JSON, nullable=True)
    appearance = Column(JSON, nullable=True)
    socials = Column(JSON, nullable=True)

    primary_image = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)

    television = Column(JSON, nullable=True)
    largometrajes = Column(JSON, nullable=True)
    cortometrajes = Column(JSON, nullable=True)
    teatro = Column(JSON, nullable=True)
    serie_documental = Column(JSON, nullable=True)
    doblaje_voz = Column(JSON, nullable=True)
    formacion = Column(JSON, nullable=True)
    habilidades = Column(JSON, nullable=True)

    # Storage folder path, set by the first upload and never re-derived
    images = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Profile id={self.id} name={self.name!r}>"
