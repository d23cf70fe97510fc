from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ..common.db import Base, new_id


class CategoryModel(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
