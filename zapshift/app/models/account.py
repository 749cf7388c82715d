"""
Account database model.

One row per email address that has ever signed in through the identity provider.
"""

from sqlalchemy import Column, Integer, String, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base
from zapshift.app.models.enums import AccountRole, db_enum


class Account(Base):
    """
    Account model.

    Credentials live with the identity provider; this row only carries the
    role used by the admin and rider gates.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    photo_url = Column(String(1024), nullable=True)

    role = Column(db_enum(AccountRole, "account_role"), default=AccountRole.USER, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_logged_in = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Account(id={self.id}, email='{self.email}', role='{self.role.value}')>"
