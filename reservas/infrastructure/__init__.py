"""Adapters de infraestructura: HTTP, archivo JSON e in-memory."""
