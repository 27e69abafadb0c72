"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2 / dataclasses).
- El dominio no conoce HTTP, CLI ni subprocess: solo conceptos del problema.
"""
