"""
Configurações centralizadas do instalador.

Este módulo centraliza as configurações da aplicação, lidas de variáveis de
ambiente (ou do arquivo .env) com valores padrão seguros.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Carrega variáveis de ambiente
project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"
load_dotenv(env_path)
load_dotenv()  # Também tenta do diretório atual

# ============================================================================
# Renovação
# ============================================================================

# Antecedência em relação ao vencimento para considerar o certificado a renovar.
# Aceita "30d", "12h", "2w", "45" (dias) ou "10%" da validade total.
RENOVAR_ANTES_PADRAO = os.getenv("PKCS12_RENOVAR_ANTES", "30d")

# ============================================================================
# Pacote PKCS#12
# ============================================================================

# Perfil de criptografia do pacote: MODERNO (AES-256) ou LEGADO (3DES/SHA1)
ALGORITMO_PADRAO = os.getenv("PKCS12_ALGORITMO", "MODERNO").upper()

ALGORITMOS_SUPORTADOS = ("MODERNO", "LEGADO")

# Sufixo fixo da cópia de segurança (<arquivo>.bak)
SUFIXO_BACKUP = ".bak"

# Permissão dos arquivos gravados (contêm chave privada)
PERMISSAO_ARQUIVO = 0o600

# ============================================================================
# Ações pós-instalação
# ============================================================================

# Timeout para execução das instruções de pós-instalação/validação (em segundos)
INSTRUCAO_TIMEOUT = int(os.getenv("INSTRUCAO_TIMEOUT", "300"))

# ============================================================================
# Logs
# ============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
