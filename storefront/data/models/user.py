from sqlalchemy import Column, String
from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    #id = subject z tokena auth
    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False, default="")
    profile = Column(String, nullable=False, default="")
