from datetime import datetime
from sqlalchemy import Column, DateTime, Numeric, String, Text
from arttrack.database import Base


class Commission(Base):
    __tablename__ = "commissions"

    id = Column(String(64), primary_key=True)
    artist_id = Column(String(255), nullable=False, index=True)  # owner's display name
    user_id = Column(String(64), nullable=True, index=True)  # stable account key, str(users.id)
    client_name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(String(100), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    contact = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    thumbnail_url = Column(String(1024), nullable=True)
    status = Column(String(20), nullable=False, index=True)
    date_added = Column(String(10), nullable=False, index=True)  # "YYYY-MM-DD"
    last_updated = Column(String(10), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<Commission {self.id} {self.artist_id} ({self.status})>"
