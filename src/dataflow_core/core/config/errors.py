# src/dataflow_core/core/config/errors.py
"""
Exceções da camada de configuração de runtime.

Estas exceções representam falhas estruturais ao carregar ou combinar
arquivos de configuração; não representam erros de execução de targets
(ver `dataflow_core.core.exceptions`).

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
"""


class ConfigError(Exception):
    """Base de todos os erros de configuração de runtime."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de defaults não existe no caminho informado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Nenhum default é inferido ou criado automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada.

    Formatos suportados: YAML (.yaml, .yml) e JSON (.json).
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"executor": {"isolated": true}}
        - override: {"executor": "shared"}

    Limites explícitos:
        - Não realiza coerção de tipos
    """
