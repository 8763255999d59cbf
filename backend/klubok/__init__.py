"""Klubok calls backend: session authentication and LiveKit room credentials."""
