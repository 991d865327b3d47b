"""
Modelos relacionados ao pacote de certificados.
"""

from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel

from ..utils.certificado_utils import dividir_blocos_pem


class ColecaoPEM(BaseModel):
    """Certificado, chave privada e cadeia em formato PEM."""
    certificado: str = ""
    chave_privada: str = ""
    cadeia: List[str] = []

    @classmethod
    def de_arquivos(
        cls,
        certificado: Union[str, Path],
        chave: Union[str, Path],
        cadeia: Optional[List[Union[str, Path]]] = None
    ) -> "ColecaoPEM":
        """
        Monta a coleção a partir de arquivos PEM.

        Cada arquivo de cadeia pode conter vários blocos; eles são separados
        mantendo a ordem em que aparecem.

        Args:
            certificado: Caminho do certificado final (leaf)
            chave: Caminho da chave privada
            cadeia: Caminhos dos arquivos da cadeia (opcional)

        Returns:
            ColecaoPEM preenchida
        """
        blocos_cadeia: List[str] = []
        for caminho in cadeia or []:
            blocos_cadeia.extend(dividir_blocos_pem(Path(caminho).read_text()))

        return cls(
            certificado=Path(certificado).read_text(),
            chave_privada=Path(chave).read_text(),
            cadeia=blocos_cadeia
        )


class ResultadoBackup(BaseModel):
    """Resultado da cópia de segurança."""
    realizado: bool
    origem: str
    destino: Optional[str] = None  # None quando não havia arquivo para proteger


class ResultadoInstrucao(BaseModel):
    """Saída de uma instrução de pós-instalação ou validação."""
    saida: str = ""
    sucesso: bool = True


class ResultadoCiclo(BaseModel):
    """Resumo de um ciclo de instalação."""
    instalado: bool
    backup: Optional[ResultadoBackup] = None
    pos_instalacao: Optional[ResultadoInstrucao] = None
    validacao: Optional[ResultadoInstrucao] = None
