# models/menu_item.py
from sqlalchemy import Column, Integer, String, Float, Boolean
from core.db import Base

class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String)  # Starters, Main Course, Desserts, Beverages
    price = Column(Float, nullable=False)
    description = Column(String, default="")
    available = Column(Boolean, default=True)
