"""
SQLAlchemy ORM models mirroring database/schema.sql.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    # bcrypt hash; the column keeps its historical name
    password = Column(String(255), nullable=False)
    username = Column(String(128))

    def __repr__(self) -> str:
        return f"<User {self.user_id} {self.email}>"


class Book(Base):
    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
