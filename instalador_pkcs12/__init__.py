"""
Instalador de certificados PKCS#12.

Decide se um pacote .p12 local precisa ser renovado, preserva o pacote atual
e gera um novo pacote protegido por senha a partir de certificado, chave e cadeia PEM.
"""

from .models import ColecaoPEM, ResultadoBackup, ResultadoCiclo, ResultadoInstrucao
from .schemas import Instalacao
from .services import Pkcs12Installer, ShellInstructionRunner, carregar_pkcs12, empacotar_pkcs12

__version__ = "1.0.0"

__all__ = [
    "ColecaoPEM",
    "Instalacao",
    "Pkcs12Installer",
    "ResultadoBackup",
    "ResultadoCiclo",
    "ResultadoInstrucao",
    "ShellInstructionRunner",
    "carregar_pkcs12",
    "empacotar_pkcs12",
]
