"""
Fixtures compartilhadas: chaves e certificados gerados em memória.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from instalador_pkcs12.models.certificado import ColecaoPEM  # noqa: E402


def _pem_certificado(certificado: x509.Certificate) -> str:
    return certificado.public_bytes(serialization.Encoding.PEM).decode()


def _pem_chave(chave, senha=None) -> str:
    criptografia = (
        serialization.BestAvailableEncryption(senha.encode()) if senha
        else serialization.NoEncryption()
    )
    return chave.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        criptografia
    ).decode()


def _emitir(nome, chave_publica, emissor_nome, emissor_chave, inicio, fim, ca=False):
    return (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, nome)]))
        .issuer_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, emissor_nome)]))
        .public_key(chave_publica)
        .serial_number(x509.random_serial_number())
        .not_valid_before(inicio)
        .not_valid_after(fim)
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
        .sign(emissor_chave, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def chave_ca():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def chave_leaf():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def chave_rsa():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificado_ca(chave_ca):
    agora = datetime.now(timezone.utc).replace(microsecond=0)
    return _emitir(
        "AutoNacional Teste CA", chave_ca.public_key(),
        "AutoNacional Teste CA", chave_ca,
        agora - timedelta(days=1), agora + timedelta(days=3650), ca=True
    )


@pytest.fixture(scope="session")
def emitir_certificado(chave_ca, certificado_ca, chave_leaf):
    """Fábrica: emite um certificado leaf com a validade desejada."""

    def _fabrica(dias_validade: int = 90, dias_desde_inicio: int = 1, chave=None):
        agora = datetime.now(timezone.utc).replace(microsecond=0)
        chave = chave or chave_leaf
        return _emitir(
            "servidor.autonacional.local", chave.public_key(),
            "AutoNacional Teste CA", chave_ca,
            agora - timedelta(days=dias_desde_inicio), agora + timedelta(days=dias_validade)
        )

    return _fabrica


@pytest.fixture(scope="session")
def certificado_leaf(emitir_certificado):
    return emitir_certificado(90)


@pytest.fixture
def colecao(certificado_leaf, chave_leaf, certificado_ca):
    return ColecaoPEM(
        certificado=_pem_certificado(certificado_leaf),
        chave_privada=_pem_chave(chave_leaf),
        cadeia=[_pem_certificado(certificado_ca)]
    )


@pytest.fixture
def colecao_para(chave_leaf):
    """Fábrica: monta uma ColecaoPEM para um certificado já emitido."""

    def _fabrica(certificado, chave=None, cadeia=None, senha_chave=None):
        return ColecaoPEM(
            certificado=_pem_certificado(certificado),
            chave_privada=_pem_chave(chave or chave_leaf, senha_chave),
            cadeia=[_pem_certificado(c) for c in cadeia or []]
        )

    return _fabrica


@pytest.fixture
def pem_certificado():
    return _pem_certificado


@pytest.fixture
def pem_chave():
    return _pem_chave
