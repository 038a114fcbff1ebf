# src/dataflow_core/core/config/__init__.py

"""
Camada de configuração de runtime do dataflow-core.

A configuração aqui tratada não descreve projetos (esses são montados em
Python); ela controla apenas os "knobs" do runtime: isolamento do executor,
validação de requisitos, diretório de checkpoints e histórico de execuções.

Responsabilidades do pacote:
    - Carregar defaults (embarcados no pacote) + overrides locais
    - Resolver a configuração final via deep-merge determinístico
    - Gerar hash canônico da configuração efetiva
    - Expor a configuração tipada (`RuntimeSettings`)

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - A mesma entrada sempre produz a mesma configuração final
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import DEFAULTS_PATH, load_config
from .merge import deep_merge
from .settings import RuntimeSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DEFAULTS_PATH",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "RuntimeSettings",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_config",
]
