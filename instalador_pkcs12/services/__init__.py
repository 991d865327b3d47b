"""
Services do instalador PKCS#12.
"""

from .execucao_instrucoes import ExecutorInstrucoes, ShellInstructionRunner
from .instalador_service import Pkcs12Installer
from .pkcs12_service import carregar_pkcs12, empacotar_pkcs12

__all__ = [
    "ExecutorInstrucoes",
    "ShellInstructionRunner",
    "Pkcs12Installer",
    "carregar_pkcs12",
    "empacotar_pkcs12",
]
