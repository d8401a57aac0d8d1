import typing as t

from sqlalchemy import JSON, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass

metadata = MetaData()


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata


class records(base):
    """One row per logical record, the item stored whole as a JSON document."""

    __tablename__ = "records"

    table_name: Mapped[str] = mapped_column(String(32), primary_key=True)
    record_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    item: Mapped[dict[str, t.Any]] = mapped_column(JSON)


class record_index(base):
    """Secondary index entries; one row per indexed value of a record."""

    __tablename__ = "record_index"

    table_name: Mapped[str] = mapped_column(String(32), primary_key=True)
    index_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(String(320), primary_key=True)
    record_key: Mapped[str] = mapped_column(String(64), primary_key=True)


class unique_index(base):
    """Claims on unique index values; the primary key rejects a second claimant."""

    __tablename__ = "unique_index"

    table_name: Mapped[str] = mapped_column(String(32), primary_key=True)
    index_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(String(320), primary_key=True)
    record_key: Mapped[str] = mapped_column(String(64))
