"""
Database Models - SQLAlchemy ORM models for the publishing schema.

This module defines the tables for:
- Doctors (article authors)
- Users (readers)
- Articles

Production deployments may own the schema elsewhere; these models are
what the queries are written against and what create_all() builds for
development and tests.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


class Doctor(Base):
    """
    A doctor account. Doctors author articles.

    The doctor flag is always true; it is stored so that doctor and
    user rows have the same shape when they are put into a session.
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first = Column(String(255), nullable=False)
    last = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    specialty = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    doctor = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    articles = relationship(
        "Article",
        back_populates="author",
        order_by="Article.id.desc()"
    )


class User(Base):
    """A reader account. Users cannot publish."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first = Column(String(255), nullable=False)
    last = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    doctor = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Article(Base):
    """
    An article written by a doctor.

    Ids are assigned monotonically by the database; the feed paginates
    on them.
    """
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    subtitle = Column(Text, nullable=False)
    text = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    author = relationship("Doctor", back_populates="articles")
