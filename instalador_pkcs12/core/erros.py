"""
Exceções do instalador PKCS#12.

Categorias:
- Pré-condição: senha ausente, certificado/chave ausentes (antes de qualquer criptografia)
- Formato: PEM inválido, DER corrompido, chave ou pacote que não decifra
- Configuração: limiar de renovação inválido

Erros de I/O não são encapsulados: chegam ao chamador como OSError.
"""

from typing import Optional


class ErroInstalacao(Exception):
    """Erro base de um ciclo de instalação."""


# ============================================================================
# Pré-condições
# ============================================================================

class ErroPrecondicao(ErroInstalacao):
    """Pré-condição violada antes de qualquer operação criptográfica."""


class ErroSenhaAusente(ErroPrecondicao):
    """Senha do pacote PKCS#12 não informada."""

    def __init__(self, mensagem: str = "senha do PKCS#12 é obrigatória e não foi informada"):
        super().__init__(mensagem)


class ErroMaterialAusente(ErroPrecondicao):
    """Certificado ou chave privada ausentes."""

    def __init__(self, mensagem: str = "certificado e chave privada são obrigatórios para o PKCS#12"):
        super().__init__(mensagem)


# ============================================================================
# Formato
# ============================================================================

class ErroFormato(ErroInstalacao):
    """
    Erro de formato em um dos componentes.

    Attributes:
        componente: "certificado", "cadeia", "chave" ou "pacote"
    """

    componente: str = ""

    def __init__(self, mensagem: str, componente: Optional[str] = None):
        if componente is not None:
            self.componente = componente
        super().__init__(mensagem)


class ErroDecodificacaoPEM(ErroFormato):
    """Bloco PEM ausente ou com tipo diferente do esperado."""


class ErroParseCertificado(ErroFormato):
    """Bytes DER do certificado não puderam ser interpretados."""

    componente = "certificado"


class ErroCadeia(ErroFormato):
    """Um certificado da cadeia é inválido (a cadeia inteira é rejeitada)."""

    componente = "cadeia"

    def __init__(self, mensagem: str, indice: int):
        self.indice = indice
        super().__init__(mensagem)


class ErroChavePrivada(ErroFormato):
    """Chave privada inválida ou que não pôde ser decifrada."""

    componente = "chave"


class ErroCodificacaoPKCS12(ErroFormato):
    """Falha ao codificar o pacote PKCS#12."""

    componente = "pacote"


class ErroLeituraPKCS12(ErroFormato):
    """Pacote PKCS#12 existente não pôde ser decifrado ou interpretado."""

    componente = "pacote"


# ============================================================================
# Configuração e instruções
# ============================================================================

class ErroConfiguracao(ErroInstalacao, ValueError):
    """Valor de configuração inválido."""


class ErroLimiarRenovacao(ErroConfiguracao):
    """Expressão de antecedência de renovação inválida."""


class ErroExecucaoInstrucao(ErroInstalacao):
    """Instrução de pós-instalação/validação não pôde ser executada."""
