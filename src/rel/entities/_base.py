from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base record with a caller-supplied string identifier."""

    id: str = PydanticField(description="Unique identifier for the record")


class TimestampedEntity(Entity):
    """Record that carries creation and modification times."""

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class EntityTable(SQLModel, table=False):
    """Base table model keyed by a caller-supplied string identifier."""

    id: str = Field(primary_key=True, description="Unique identifier for the row")


class TimestampedTable(EntityTable, table=False):
    """Base table model with creation and modification times."""

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
    )
