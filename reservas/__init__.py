"""Motor de reservas y disponibilidad para una flota de alquiler."""

__version__ = "0.1.0"
