from sqlalchemy import Column, DateTime, event
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from core.id_generator import generate_random_id

# Shared Base for all tables of the hosted database
Base = declarative_base()


class CreatedAtMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


@event.listens_for(Base, "before_insert", propagate=True)
def assign_random_id(mapper, connection, target):
    # Rows saved without an identifier get one here, never from the client
    if getattr(target, "id", None) is None:
        target.id = generate_random_id(target.__tablename__)
