from sqlalchemy import Column, String, Date, Boolean, Index

from ..core.database import Base

class Slot(Base):
    __tablename__ = "slots"
    
    id = Column(String(64), primary_key=True, index=True)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    available = Column(Boolean, nullable=False, default=True)
    
    # Occupant, set while a confirmed booking holds the slot
    patient_id = Column(String(64), nullable=True)
    patient_name = Column(String(255), nullable=True)
    
    __table_args__ = (
        Index("ix_slots_date_time", "date", "time"),
    )
    
    def __repr__(self):
        return f"<Slot(id={self.id}, date='{self.date}', time='{self.time}', available={self.available})>"
