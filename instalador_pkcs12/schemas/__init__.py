"""
Schemas Pydantic do instalador.
"""

from .instalacao import Instalacao

__all__ = [
    "Instalacao",
]
