from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Persona(Base):
    __tablename__ = "personas"

    id = Column(Integer, primary_key=True, info={"admin": "addForm:exclude;editForm:exclude"})
    name = Column(
        String(120),
        nullable=False,
        info={"admin": "required;maxLength:120;placeholder:Jane Doe"},
    )
    email = Column(
        String(255),
        nullable=False,
        unique=True,
        info={"admin": r"required;regex:[^@\s]+@[^@\s]+\.[^@\s]+;displayName:E-mail"},
    )
    age = Column(Integer, nullable=True, info={"admin": "min:0;max:150"})
    is_active = Column(Boolean, nullable=False, default=True, info={"admin": "initial:true;search:exclude"})

    @classmethod
    def admin_display_name(cls) -> str:
        return "Personas"


SEED_PERSONAS = [
    {"name": "John Doe", "email": "john@example.com", "age": 30, "is_active": True},
    {"name": "Jane Smith", "email": "jane@example.com", "age": 25, "is_active": True},
    {"name": "Bob Johnson", "email": "bob@example.com", "age": 35, "is_active": False},
    {"name": "Alice Brown", "email": "alice@example.com", "age": 28, "is_active": True},
]
