"""
Modelos do instalador.
"""

from .certificado import (
    ColecaoPEM,
    ResultadoBackup,
    ResultadoInstrucao,
    ResultadoCiclo,
)

__all__ = [
    "ColecaoPEM",
    "ResultadoBackup",
    "ResultadoInstrucao",
    "ResultadoCiclo",
]
