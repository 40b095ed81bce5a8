from sqlalchemy import Column, Text

from models.base_model import BaseModel


class CategoryModel(BaseModel):
    __tablename__ = "Category"

    name = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<CategoryModel id={self.id} name={self.name!r}>"
