# tests/conftest.py
"""
Fixtures compartilhados para testes do dataflow-core.

Este módulo define fixtures reutilizáveis que fornecem:
- configuração de runtime mínima e determinística
- contexto de execução controlado (RunContext)
- targets e mappings dummy para testes de scheduler, executor e runner
- DataFrames pequenos para testes dos kinds concretos

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Targets e mappings dummy herdam das bases do core apenas para obter
      identificadores e metadados; o comportamento é local ao teste
    - Imports do core são realizados de forma lazy para melhorar a
      clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa um plano real
    - Nenhuma fixture acessa filesystem fora de `tmp_path`

Limites explícitos:
    - Não substituir testes de integração (ver tests/e2e)
"""

from datetime import datetime, timezone

import pandas as pd
import pytest


@pytest.fixture
def dummy_config() -> dict:
    """
    Configuração de runtime já resolvida, equivalente aos defaults do pacote.

    Returns:
        dict: Configuração mínima e válida para execução de testes.
    """
    return {
        "executor": {"isolated": True},
        "scheduler": {"validate_requirements": True},
        "engine": {"checkpoint_dir": None},
        "history": {"path": None},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    RunContext determinístico para testes.

    Decisões arquiteturais:
        - `run_id` e `created_at` são fixos para garantir determinismo
        - O import é lazy para falhar com mensagem clara se o core faltar
    """
    from dataflow_core.core.execution.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def calls() -> list:
    """Registro compartilhado de operações executadas por targets dummy."""
    return []


@pytest.fixture
def DummyTarget(calls):
    """
    Fixture factory que fornece uma implementação mínima de Target.

    A classe retornada:
    - declara os mesmos recursos fornecidos/requeridos em todas as fases
      (ou apenas nas fases informadas em `phases`)
    - registra `(nome, fase)` na lista compartilhada `calls` a cada operação
    - pode falhar numa fase específica (`fail_on`) com RuntimeError

    Invariantes:
        - Não executa I/O
        - Não depende do Executor recebido

    Returns:
        type: Classe _DummyTarget instanciável pelos testes.
    """
    from dataflow_core.core.execution.phase import Lifecycle, Phase
    from dataflow_core.core.model.instance import InstanceProperties
    from dataflow_core.core.model.target import BaseTarget

    class _DummyTarget(BaseTarget):
        def __init__(
            self,
            name,
            *,
            provides=(),
            requires=(),
            phases=None,
            enabled=True,
            fail_on=None,
        ):
            super().__init__(InstanceProperties(name=name, kind="dummy"), enabled=enabled)
            self._provides = set(provides)
            self._requires = set(requires)
            self.phases = list(phases) if phases is not None else list(Lifecycle.ALL)
            self.fail_on = fail_on

        def provides(self, phase):
            return set(self._provides) if phase in self.phases else set()

        def requires(self, phase):
            return set(self._requires) if phase in self.phases else set()

        def _record(self, phase):
            calls.append((self.name, phase))
            if self.fail_on == phase:
                raise RuntimeError(f"{self.name} failed in {phase}")

        def create(self, executor):
            self._record(Phase.CREATE)

        def migrate(self, executor):
            self._record(Phase.MIGRATE)

        def build(self, executor):
            self._record(Phase.BUILD)

        def truncate(self, executor):
            self._record(Phase.TRUNCATE)

        def destroy(self, executor):
            self._record(Phase.DESTROY)

    return _DummyTarget


@pytest.fixture
def DummyMapping():
    """
    Fixture factory que fornece um Mapping dummy que conta execuções.

    Cada execução produz, para cada output declarado, um DataFrame de uma
    linha com o nome do mapping e o número de inputs recebidos.

    Returns:
        type: Classe _DummyMapping instanciável pelos testes.
    """
    from dataflow_core.core.model.identifiers import MappingOutputIdentifier
    from dataflow_core.core.model.instance import InstanceProperties
    from dataflow_core.core.model.mapping import BaseMapping, MappingHints

    class _DummyMapping(BaseMapping):
        def __init__(self, name, inputs=(), outputs=("main",), hints=None):
            self.properties = InstanceProperties(name=name, kind="dummy")
            self._inputs = [MappingOutputIdentifier.parse(i) for i in inputs]
            self._outputs = list(outputs)
            self.hints = hints or MappingHints()
            self.executions = 0

        def inputs(self):
            return list(self._inputs)

        def outputs(self):
            return list(self._outputs)

        def execute(self, executor, inputs):
            self.executions += 1
            frame = pd.DataFrame({"source": [self.name], "inputs": [len(inputs)]})
            return {output: frame.copy() for output in self._outputs}

    return _DummyMapping


@pytest.fixture
def project():
    """Projeto vazio nomeado `test`."""
    from dataflow_core.core.model.project import Project

    return Project("test")


@pytest.fixture
def orders_df() -> pd.DataFrame:
    """Pedidos pequenos e determinísticos (com uma linha duplicada)."""
    return pd.DataFrame(
        {
            "order_id": [1, 2, 3, 3, 4],
            "customer": ["ana", "bob", "ana", "ana", "carl"],
            "amount": [10.0, 20.0, 5.0, 5.0, 7.5],
            "year": ["2020", "2020", "2021", "2021", "2021"],
        }
    )
