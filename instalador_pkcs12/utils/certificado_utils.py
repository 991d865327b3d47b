"""
Utilitários para manipulação de certificados PEM e da antecedência de renovação.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import parsedatetime
from cryptography import x509

from ..core.erros import ErroDecodificacaoPEM, ErroLimiarRenovacao
from ..infrastructure.logger import get_logger

logger = get_logger(__name__)

# -----BEGIN TIPO----- ... -----END TIPO-----
_PADRAO_BLOCO_PEM = re.compile(
    r'-----BEGIN (?P<tipo>[A-Z0-9 ]+)-----\r?\n(?P<corpo>.*?)-----END (?P=tipo)-----',
    re.DOTALL
)

_PADRAO_PERCENTUAL = re.compile(r"^(?P<valor>\d+)\s*%$")

# Referência fixa para converter "30d", "2w" etc. em timedelta
_BASE_INTERVALO = datetime(2000, 1, 1)

_CALENDARIO = parsedatetime.Calendar()


def dividir_blocos_pem(texto: str) -> List[str]:
    """
    Separa um texto com vários blocos PEM (ex: fullchain) em blocos individuais.

    Args:
        texto: Texto contendo zero ou mais blocos PEM

    Returns:
        Lista de blocos, na ordem em que aparecem
    """
    return [m.group(0) + "\n" for m in _PADRAO_BLOCO_PEM.finditer(texto or "")]


def decodificar_bloco_pem(texto: str, tipo_esperado: str, componente: str) -> bytes:
    """
    Decodifica o primeiro bloco PEM do texto e retorna os bytes DER.

    Args:
        texto: Texto PEM
        tipo_esperado: Tipo do bloco (ex: "CERTIFICATE")
        componente: Nome do componente para a mensagem de erro

    Returns:
        Bytes DER do bloco

    Raises:
        ErroDecodificacaoPEM: Se não houver bloco, o tipo for outro ou o base64 for inválido
    """
    match = _PADRAO_BLOCO_PEM.search(texto or "")
    if match is None:
        raise ErroDecodificacaoPEM(f"{componente}: bloco PEM {tipo_esperado} ausente", componente)

    tipo = match.group('tipo')
    if tipo != tipo_esperado:
        raise ErroDecodificacaoPEM(
            f"{componente}: bloco PEM do tipo {tipo}, esperado {tipo_esperado}",
            componente
        )

    # Cabeçalhos RFC 1421 (ex: Proc-Type) não fazem parte do conteúdo
    linhas = [l.strip() for l in match.group('corpo').splitlines() if l.strip() and ':' not in l]
    try:
        return base64.b64decode("".join(linhas), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ErroDecodificacaoPEM(f"{componente}: base64 inválido no bloco PEM ({e})", componente) from e


@dataclass(frozen=True)
class LimiarRenovacao:
    """
    Antecedência de renovação já interpretada.

    Exatamente um dos campos é preenchido: um intervalo fixo ou um
    percentual da validade total do certificado.
    """
    intervalo: Optional[timedelta] = None
    percentual: Optional[int] = None

    @classmethod
    def interpretar(cls, expressao: str) -> "LimiarRenovacao":
        """
        Interpreta expressões como "30d", "12h", "2w", "45" (dias) ou "10%".

        Intervalos são interpretados pelo parsedatetime, então formas como
        "10 days" ou "3 days 12 hours" também são aceitas.

        Raises:
            ErroLimiarRenovacao: Se a expressão não for reconhecida ou estiver fora do intervalo de datas
        """
        texto = (expressao or "").strip().lower()
        invalida = ErroLimiarRenovacao(
            f"antecedência de renovação inválida: {expressao!r} (use ex: 30d, 12h, 2w ou 10%)"
        )
        if not texto:
            raise invalida

        match = _PADRAO_PERCENTUAL.match(texto)
        if match:
            valor = int(match.group('valor'))
            if valor > 100:
                raise ErroLimiarRenovacao(f"percentual de renovação deve estar entre 0 e 100: {expressao!r}")
            return cls(percentual=valor)

        # Número sem unidade = dias
        if texto.isdigit():
            texto += " days"

        try:
            limite, estado = _CALENDARIO.parseDT(f"{texto} before", _BASE_INTERVALO)
        except (OverflowError, ValueError) as e:
            raise ErroLimiarRenovacao(
                f"antecedência de renovação fora do intervalo suportado: {expressao!r}"
            ) from e

        if not estado:
            raise invalida

        intervalo = _BASE_INTERVALO - limite
        if intervalo < timedelta(0):
            raise invalida

        return cls(intervalo=intervalo)

    def antecedencia(self, certificado: x509.Certificate) -> timedelta:
        """Antecedência efetiva para o certificado informado."""
        if self.intervalo is not None:
            return self.intervalo

        validade = certificado.not_valid_after_utc - certificado.not_valid_before_utc
        return validade * self.percentual / 100


def precisa_renovar(
    certificado: x509.Certificate,
    limiar: LimiarRenovacao,
    agora: Optional[datetime] = None
) -> Tuple[bool, datetime]:
    """
    Verifica se o certificado estará vencido em "agora + antecedência".

    Args:
        certificado: Certificado final (leaf)
        limiar: Antecedência já interpretada
        agora: Instante de referência (UTC). Se None, usa o relógio atual.

    Returns:
        Tupla (renovar, data_limite)

    Raises:
        ErroLimiarRenovacao: Se "agora + antecedência" passar da maior data representável
    """
    agora = agora or datetime.now(timezone.utc)
    if agora.tzinfo is None:
        agora = agora.replace(tzinfo=timezone.utc)

    try:
        data_limite = agora + limiar.antecedencia(certificado)
    except OverflowError as e:
        raise ErroLimiarRenovacao(
            f"antecedência de renovação ultrapassa a maior data representável: {limiar.intervalo}"
        ) from e

    vencimento = certificado.not_valid_after_utc

    renovar = vencimento <= data_limite
    logger.debug(
        f"Vencimento {vencimento.isoformat()} / limite {data_limite.isoformat()}: "
        f"{'renovar' if renovar else 'válido'}"
    )
    return renovar, data_limite
