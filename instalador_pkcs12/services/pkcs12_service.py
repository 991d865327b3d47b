"""
Service para empacotamento e leitura de pacotes PKCS#12.

Transforma uma ColecaoPEM (certificado, chave e cadeia) em um pacote .p12
protegido por senha e lê pacotes existentes. A criptografia do formato fica
inteiramente a cargo da biblioteca cryptography.
"""

from typing import List, Optional, Tuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from ..core.erros import (
    ErroCadeia,
    ErroChavePrivada,
    ErroCodificacaoPKCS12,
    ErroConfiguracao,
    ErroDecodificacaoPEM,
    ErroLeituraPKCS12,
    ErroMaterialAusente,
    ErroParseCertificado,
    ErroSenhaAusente,
)
from ..infrastructure.config import ALGORITMO_PADRAO, ALGORITMOS_SUPORTADOS
from ..infrastructure.logger import get_logger
from ..models.certificado import ColecaoPEM
from ..utils.certificado_utils import decodificar_bloco_pem

logger = get_logger(__name__)

TIPO_CERTIFICADO = "CERTIFICATE"


def _carregar_certificado(texto: str, componente: str) -> x509.Certificate:
    der = decodificar_bloco_pem(texto, TIPO_CERTIFICADO, componente)
    try:
        return x509.load_der_x509_certificate(der)
    except ValueError as e:
        raise ErroParseCertificado(
            f"{componente}: falha ao interpretar os bytes DER do certificado X.509 ({e})",
            componente
        ) from e


def _carregar_cadeia(cadeia: List[str]) -> List[x509.Certificate]:
    """Carrega a cadeia na ordem recebida; qualquer item inválido rejeita tudo."""
    certificados = []
    for indice, texto in enumerate(cadeia):
        try:
            certificados.append(_carregar_certificado(texto, f"cadeia[{indice}]"))
        except (ErroDecodificacaoPEM, ErroParseCertificado) as e:
            raise ErroCadeia(str(e), indice) from e
    return certificados


def _carregar_chave(texto: str, senha: Optional[str]):
    """
    Carrega a chave privada PEM.

    A senha só é repassada quando a chave está criptografada (PKCS#8
    "ENCRYPTED PRIVATE KEY" ou cabeçalho "Proc-Type: 4,ENCRYPTED").
    """
    criptografada = "ENCRYPTED" in texto
    senha_bytes = senha.encode("utf-8") if criptografada and senha else None

    try:
        return serialization.load_pem_private_key(texto.encode("utf-8"), password=senha_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        if criptografada:
            mensagem = f"chave: não foi possível decifrar a chave privada ({e})"
        else:
            mensagem = f"chave: falha ao interpretar a chave privada ({e})"
        raise ErroChavePrivada(mensagem) from e


def _criptografia(senha: str, algoritmo: str) -> serialization.KeySerializationEncryption:
    senha_bytes = senha.encode("utf-8")

    if algoritmo == "LEGADO":
        # Compatível com decodificadores antigos (Java 8, OpenSSL 1.0, Windows Server 2016)
        return (
            serialization.PrivateFormat.PKCS12.encryption_builder()
            .kdf_rounds(50000)
            .key_cert_algorithm(pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC)
            .hmac_hash(hashes.SHA1())
            .build(senha_bytes)
        )

    return serialization.BestAvailableEncryption(senha_bytes)


def empacotar_pkcs12(
    colecao: ColecaoPEM,
    senha: str,
    senha_chave: Optional[str] = None,
    algoritmo: str = ALGORITMO_PADRAO
) -> bytes:
    """
    Empacota certificado, chave e cadeia em um PKCS#12 protegido por senha.

    Args:
        colecao: Certificado, chave privada e cadeia em PEM
        senha: Senha do pacote (obrigatória)
        senha_chave: Senha da chave PEM, se criptografada. Se None, usa a senha do pacote.
        algoritmo: "MODERNO" (AES-256) ou "LEGADO" (3DES/SHA1)

    Returns:
        Bytes do pacote PKCS#12

    Raises:
        ErroSenhaAusente: Se a senha estiver vazia
        ErroConfiguracao: Se o algoritmo não for MODERNO nem LEGADO
        ErroMaterialAusente: Se o certificado ou a chave estiverem vazios
        ErroDecodificacaoPEM: Se o bloco PEM do certificado estiver ausente ou for de outro tipo
        ErroParseCertificado: Se os bytes DER do certificado estiverem corrompidos
        ErroCadeia: Se algum certificado da cadeia for inválido
        ErroChavePrivada: Se a chave não puder ser interpretada ou decifrada
        ErroCodificacaoPKCS12: Se a codificação falhar (ex: tipo de chave não suportado)
    """
    if not senha:
        raise ErroSenhaAusente()

    algoritmo = (algoritmo or "").upper()
    if algoritmo not in ALGORITMOS_SUPORTADOS:
        raise ErroConfiguracao(
            f"algoritmo deve ser um de: {', '.join(ALGORITMOS_SUPORTADOS)} (recebido: {algoritmo!r})"
        )

    if not colecao.certificado or not colecao.chave_privada:
        raise ErroMaterialAusente()

    certificado = _carregar_certificado(colecao.certificado, "certificado")
    cadeia = _carregar_cadeia(colecao.cadeia)
    chave = _carregar_chave(colecao.chave_privada, senha_chave if senha_chave is not None else senha)

    try:
        conteudo = pkcs12.serialize_key_and_certificates(
            name=None,
            key=chave,
            cert=certificado,
            cas=cadeia or None,
            encryption_algorithm=_criptografia(senha, algoritmo)
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ErroCodificacaoPKCS12(f"erro ao codificar PKCS#12: {e}") from e

    logger.debug(f"PKCS#12 gerado: {len(conteudo)} bytes, {len(cadeia)} certificado(s) na cadeia")
    return conteudo


def carregar_pkcs12(dados: bytes, senha: str) -> Tuple[object, x509.Certificate, List[x509.Certificate]]:
    """
    Lê um pacote PKCS#12.

    Args:
        dados: Conteúdo do arquivo .p12/.pfx
        senha: Senha do pacote

    Returns:
        Tupla (chave, certificado, cadeia)

    Raises:
        ErroLeituraPKCS12: Se a senha estiver incorreta ou o conteúdo for inválido
    """
    senha_bytes = senha.encode("utf-8") if senha else None

    try:
        chave, certificado, cadeia = pkcs12.load_key_and_certificates(dados, senha_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        error_msg = str(e).lower()
        if "mac" in error_msg or "password" in error_msg or "decrypt" in error_msg:
            raise ErroLeituraPKCS12(f"senha do PKCS#12 incorreta ou arquivo corrompido ({e})") from e
        raise ErroLeituraPKCS12(f"erro ao carregar PKCS#12: {e}") from e

    if certificado is None:
        raise ErroLeituraPKCS12("certificado não encontrado no arquivo PKCS#12")

    return chave, certificado, list(cadeia or [])
