from sqlalchemy import Boolean, Column, DateTime, Text, func

from hardware_store.db import Base


class Profile(Base):
    """
    Storefront data for an authenticated identity.

    id is the identity issued by the external auth provider; this table never
    stores credentials. is_admin gates the back office.
    """

    __tablename__ = "profiles"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    full_name = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    country = Column(Text, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Profile id={self.id!r} email={self.email!r}>"
