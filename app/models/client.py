# app/models/client.py
from sqlalchemy import Column, Integer, String

from app.db.base import Base


class Client(Base):
    """
    Customer for whom projects are delivered.
    """

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    contact_person_position = Column(String(128), nullable=True)
    address = Column(String(255), nullable=True)
    map_location = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Client id={self.id} name={self.name}>"
