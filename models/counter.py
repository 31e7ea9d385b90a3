from sqlalchemy import Column, String, Integer
from database.base import Base

class Counter(Base):
    """Named monotonic sequence, e.g. ``order_number``."""
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    seq = Column(Integer, nullable=False, default=0)
