"""
Service container

All service objects are built once at startup and shared by reference;
request handlers reach them through ``request.app.state.services``.
"""

from custody_service.config.settings import Settings
from custody_service.core.closure_processor import ClosureProcessor
from custody_service.core.custody_ledger import CustodyLedger
from custody_service.core.evidence_registrar import EvidenceRegistrar
from custody_service.core.incident_registry import IncidentRegistry
from custody_service.core.reporting import ReportService
from custody_service.core.security import TokenService
from custody_service.core.staff_directory import StaffDirectory
from custody_service.core.tracking import TrackingCodes
from custody_service.infrastructure.storage import StorageProvider


class ServiceContainer:
    """Wires the services together around one settings object and one storage provider"""

    def __init__(self, settings: Settings, storage: StorageProvider):
        self.settings = settings
        self.storage = storage

        self.tokens = TokenService(settings)
        self.tracking = TrackingCodes(
            prefix=settings.tracking_prefix,
            box_size=settings.qr_box_size,
            border=settings.qr_border,
        )

        self.staff = StaffDirectory(settings, self.tokens)
        self.incidents = IncidentRegistry(settings)
        self.evidence = EvidenceRegistrar(settings, storage, self.incidents, self.tracking)
        self.transfers = CustodyLedger(self.incidents)
        self.closures = ClosureProcessor(self.incidents)
        self.reports = ReportService(self.incidents)
