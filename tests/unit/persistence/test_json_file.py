import json
from datetime import date, datetime, time
from decimal import Decimal

from reservas.application.interfaces.persistence_port import Snapshot
from reservas.application.reservation_store import ReservationStore
from reservas.domain.entities.reservation import ReservationStatus
from reservas.domain.entities.vehicle import VehicleStatus
from reservas.infrastructure.persistence.json_file import JsonFilePersistence


def test_missing_file_loads_empty_snapshot(tmp_path):
    snapshot = JsonFilePersistence(tmp_path / "estado.json").load()
    assert snapshot.vehicles == []
    assert snapshot.reservations == []
    assert snapshot.collections == {}


def test_snapshot_shape_survives_save_and_load(tmp_path, fleet, make_reservation):
    persistence = JsonFilePersistence(tmp_path / "data" / "estado.json")
    original = Snapshot(
        vehicles=fleet,
        reservations=[make_reservation("R1", total="1234.567")],
        collections={
            "expenses": [{"concepto": "Seguro", "monto": 500}],
            "inspection_logs": [],
            "custom_notes": {"a": 1},
        },
    )

    persistence.save(original)
    loaded = persistence.load()

    assert loaded.vehicles == fleet
    assert loaded.reservations[0].total_amount == Decimal("1234.567")
    assert loaded.reservations[0].start_date == date(2026, 3, 10)
    assert loaded.collections == original.collections
    assert not list((tmp_path / "data").glob(".estado.json.*"))


def test_legacy_document_keys_are_accepted(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(
        json.dumps(
            {
                "vehicles": [
                    {"id": "1", "nombre": "Toyota Vitz Blanco", "precio": 195, "estado": "En Taller"}
                ],
                "reservations": [
                    {
                        "id": "JM-ABC123",
                        "cliente": "Ana",
                        "auto": "Toyota Vitz Blanco",
                        "inicio": "05/03/2026",
                        "fin": "2026-03-07",
                        "total": 390,
                        "status": "Requested",
                        "ci": "1234567",
                        "celular": "+595 981 000000",
                    }
                ],
                "thresholds": {"maintenance_alert_days": 7},
            }
        ),
        encoding="utf-8",
    )

    snapshot = JsonFilePersistence(path).load()

    assert snapshot.vehicles[0].status == VehicleStatus.IN_WORKSHOP
    reservation = snapshot.reservations[0]
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.start_date == date(2026, 3, 5)
    assert reservation.document_id == "1234567"
    assert snapshot.collections == {"thresholds": {"maintenance_alert_days": 7}}


def test_invalid_records_are_skipped(tmp_path):
    path = tmp_path / "estado.json"
    path.write_text(
        json.dumps(
            {
                "reservations": [
                    {"id": "R1", "cliente": "Ana", "auto": "X", "inicio": "nunca", "fin": "nunca"},
                    {"id": "R2", "cliente": "Leo", "auto": "X", "inicio": "2026-03-01", "fin": "2026-03-02"},
                ]
            }
        ),
        encoding="utf-8",
    )

    snapshot = JsonFilePersistence(path).load()

    assert [r.id for r in snapshot.reservations] == ["R2"]


def test_store_writes_through_to_file(tmp_path, clock, make_reservation):
    path = tmp_path / "estado.json"
    store = ReservationStore(persistence=JsonFilePersistence(path), clock=clock)

    store.add(make_reservation("R1"))
    store.cancel("R1", "59", "331")

    reopened = ReservationStore(persistence=JsonFilePersistence(path), clock=clock)
    reservation = reopened.get("R1")
    assert reservation.status == ReservationStatus.CANCELLED
    assert "RESCISIÓN" in reservation.notes


def test_pickup_and_return_times_survive_save_and_load(tmp_path, make_reservation):
    persistence = JsonFilePersistence(tmp_path / "estado.json")
    reservation = make_reservation("JM-ABC123")
    reservation.pickup_time = time(8, 0)
    reservation.return_time = time(10, 30)

    persistence.save(Snapshot(reservations=[reservation]))
    loaded = persistence.load().reservations[0]

    assert loaded.starts_at == datetime(2026, 3, 10, 8, 0)
    assert loaded.ends_at == datetime(2026, 3, 12, 10, 30)


def test_legacy_times_inside_date_fields_are_kept(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(
        json.dumps(
            {
                "reservations": [
                    {
                        "id": "JM-XYZ789",
                        "cliente": "Ana",
                        "auto": "Toyota Vitz Blanco",
                        "inicio": "2026-03-10 08:00",
                        "fin": "12/03/2026 10:00",
                        "total": 585,
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    reservation = JsonFilePersistence(path).load().reservations[0]

    assert reservation.start_date == date(2026, 3, 10)
    assert (reservation.pickup_time, reservation.return_time) == (time(8, 0), time(10, 0))
