"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from db import Base


class AuthorORM(Base):
    __tablename__ = "authors"
    __table_args__ = (UniqueConstraint("first_name", "last_name", name="uq_author_name"),)

    id = Column(String(36), primary_key=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    books = relationship("BookORM", back_populates="author")


class ShelfORM(Base):
    __tablename__ = "shelves"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    books = relationship("BookORM", back_populates="shelf")


class BookORM(Base):
    __tablename__ = "books"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    author_id = Column(String(36), ForeignKey("authors.id"), nullable=False, index=True)
    isbn = Column(String(13), nullable=False, unique=True)
    date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    jacket = Column(String(255), nullable=True)
    shelf_id = Column(String(36), ForeignKey("shelves.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    author = relationship("AuthorORM", back_populates="books")
    shelf = relationship("ShelfORM", back_populates="books")
