from sqlalchemy.orm import as_declarative, declared_attr
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, Enum, Uuid, func
import uuid


def enum_column_type(enum_cls):
    """Store enum values as plain strings and load them back as members"""
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda enum_cls: [e.value for e in enum_cls]
    )


@as_declarative()
class Base:
    __abstract__ = True  # Prevents creating a table for the base class

    id: Mapped[uuid.UUID]

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    # Portable UUID type so the same models run on PostgreSQL and SQLite
    id = mapped_column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
