import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from reservas.bootstrap import build_engine  # noqa: E402
from reservas.config import get_settings  # noqa: E402
from reservas.domain.value_objects.money import format_brl  # noqa: E402
from reservas.logging_config import configure_logging  # noqa: E402


async def report():
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = build_engine(settings)

    fleet = await engine["fleet_report"].execute()
    summary = fleet.summary
    print(f"Ingresos: {format_brl(summary.income)} (Gs. {summary.income_pyg})")
    print(f"Gastos:   {format_brl(summary.expenses)}")
    print(f"Neto:     {format_brl(summary.net)} | Margen {summary.margin_percent}%")
    print("-" * 50)
    for vehicle in fleet.vehicles:
        print(f"{vehicle.name}: {format_brl(vehicle.revenue)} | desgaste {vehicle.wear_index}/100")
    for alert in fleet.alerts:
        print(f"Mantenimiento: {alert.name} vence {alert.maintenance_due} ({alert.days_left} días)")


if __name__ == "__main__":
    asyncio.run(report())
