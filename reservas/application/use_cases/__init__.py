"""Casos de uso asíncronos sobre el ReservationStore."""

from reservas.application.use_cases.fleet_report import (
    FinancialSummary,
    FleetReport,
    FleetReportUseCase,
    MaintenanceAlert,
    VehicleReport,
)
from reservas.application.use_cases.publish_changes import PublishChangesUseCase
from reservas.application.use_cases.sync_feed import SyncFeedUseCase, SyncResult

__all__ = [
    "SyncFeedUseCase",
    "SyncResult",
    "PublishChangesUseCase",
    "FleetReportUseCase",
    "FleetReport",
    "FinancialSummary",
    "VehicleReport",
    "MaintenanceAlert",
]
