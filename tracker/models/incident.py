import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum

from tracker.database import Base
from tracker.utils.timestamps import utcnow


class Severity(str, enum.Enum):
    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"


class Status(str, enum.Enum):
    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    service = Column(String(100), nullable=False, index=True)
    severity = Column(Enum(Severity, name="severity"), nullable=False, index=True)
    status = Column(Enum(Status, name="status"), nullable=False, default=Status.OPEN, index=True)
    owner = Column(String(255), nullable=True)
    summary = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Incident {self.id} {self.severity.value if self.severity else None} {self.title!r}>"
