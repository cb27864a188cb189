"""
Database Models

SQLAlchemy ORM models for staff, incidents, evidence items, custody transfers
and case closures.

Officer name/badge pairs are stored as plain snapshot columns, never as
foreign keys to staff_members: historical records keep the identity that was
current when they were written.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp (the storage convention for every DateTime column)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class StaffMemberDB(Base):
    """Staff member database model"""

    __tablename__ = "staff_members"

    staff_id = Column(String(36), primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    badge_number = Column(String(50), nullable=False, unique=True, index=True)
    designation = Column(String(20), nullable=False, default="OFFICER")
    station_assignment = Column(String(100), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<StaffMemberDB(staff_id='{self.staff_id}', badge_number='{self.badge_number}')>"


class IncidentDB(Base):
    """Incident (FIR) database model"""

    __tablename__ = "incidents"
    __table_args__ = (
        Index("ix_incidents_station_year", "registration_station", "registration_year"),
    )

    incident_id = Column(String(36), primary_key=True, index=True)
    registration_station = Column(String(150), nullable=False)
    fir_number = Column(String(100), nullable=False, index=True)
    registration_year = Column(Integer, nullable=False)
    investigator_name = Column(String(100), nullable=True)
    investigator_badge = Column(String(50), nullable=True, index=True)
    fir_filing_date = Column(Date, nullable=False)
    evidence_seizure_date = Column(Date, nullable=False)
    applicable_sections = Column(Text, nullable=False)
    current_status = Column(String(20), nullable=False, default="ACTIVE", index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    closed_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<IncidentDB(incident_id='{self.incident_id}', fir_number='{self.fir_number}')>"


class EvidenceItemDB(Base):
    """Evidence item database model"""

    __tablename__ = "evidence_items"
    __table_args__ = (
        Index("ix_evidence_items_incident_created", "incident_id", "created_at"),
    )

    evidence_id = Column(String(36), primary_key=True, index=True)
    incident_id = Column(String(36), ForeignKey("incidents.incident_id"), nullable=False, index=True)
    item_category = Column(String(100), nullable=False, index=True)
    associated_party = Column(String(20), nullable=False)
    item_description = Column(Text, nullable=False)
    quantity_amount = Column(Float, nullable=False)
    measurement_unit = Column(String(50), nullable=False, default="piece")
    room_number = Column(String(50), nullable=True)
    rack_number = Column(String(50), nullable=True)
    compartment_id = Column(String(50), nullable=True)
    remarks = Column(Text, nullable=True)
    photograph_key = Column(Text, nullable=True)
    tracking_qr_key = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<EvidenceItemDB(evidence_id='{self.evidence_id}', category='{self.item_category}')>"


class CustodyTransferDB(Base):
    """Custody transfer database model (append-only)"""

    __tablename__ = "custody_transfers"
    __table_args__ = (
        Index("ix_custody_transfers_evidence_timestamp", "evidence_id", "transfer_timestamp"),
    )

    transfer_id = Column(String(36), primary_key=True, index=True)
    evidence_id = Column(String(36), ForeignKey("evidence_items.evidence_id"), nullable=False, index=True)
    source_location = Column(String(255), nullable=True)
    releasing_officer_name = Column(String(100), nullable=True)
    releasing_officer_badge = Column(String(50), nullable=True)
    destination_location = Column(String(255), nullable=False)
    receiving_officer_name = Column(String(100), nullable=True)
    receiving_officer_badge = Column(String(50), nullable=True)
    transfer_purpose = Column(String(30), nullable=False)
    transfer_timestamp = Column(DateTime, nullable=False, default=utcnow)
    notes = Column(Text, nullable=True)
    recorded_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<CustodyTransferDB(transfer_id='{self.transfer_id}', evidence_id='{self.evidence_id}')>"


class CaseClosureDB(Base):
    """Case closure database model"""

    __tablename__ = "case_closures"

    closure_id = Column(String(36), primary_key=True, index=True)
    incident_id = Column(String(36), ForeignKey("incidents.incident_id"), nullable=False, index=True)
    disposition_method = Column(String(30), nullable=False)
    court_order_number = Column(String(100), nullable=True)
    closure_date = Column(Date, nullable=False)
    closure_remarks = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<CaseClosureDB(closure_id='{self.closure_id}', incident_id='{self.incident_id}')>"
