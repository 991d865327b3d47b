"""
Schema Pydantic do destino de instalação PKCS#12.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..infrastructure.config import ALGORITMO_PADRAO, ALGORITMOS_SUPORTADOS


class Instalacao(BaseModel):
    """Destino de instalação de um pacote PKCS#12."""

    arquivo: str = Field(..., min_length=1, description="Caminho do arquivo .p12/.pfx")
    senha_p12: str = Field(default="", repr=False, description="Senha para ler o pacote atual e proteger o novo")
    senha_chave: Optional[str] = Field(
        default=None,
        repr=False,
        description="Senha da chave PEM criptografada. Se None, usa senha_p12"
    )
    acao_pos_instalacao: str = Field(default="", description="Instrução executada após instalar")
    validacao_instalacao: str = Field(default="", description="Instrução de validação (saída '0' ou '1')")
    fazer_backup: bool = Field(default=True, description="Copiar o pacote atual para <arquivo>.bak")
    algoritmo: str = Field(default=ALGORITMO_PADRAO, description="Perfil de criptografia: MODERNO ou LEGADO")

    @field_validator('algoritmo')
    @classmethod
    def validate_algoritmo(cls, v: str) -> str:
        """Valida o perfil de criptografia."""
        if v.upper() not in ALGORITMOS_SUPORTADOS:
            raise ValueError(f"algoritmo deve ser um de: {', '.join(ALGORITMOS_SUPORTADOS)}")
        return v.upper()
