from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..common.db import Base


class CredentialModel(Base):
    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
