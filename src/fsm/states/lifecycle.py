"""
Estados de ciclo de vida dos objetos "mutável-depois-congelado".

Dois ciclos independentes compartilham a mesma FSM:
- Montador de mensagem: UNBUILT → COMPOSED
- Configuração de sessão: CONFIGURABLE → FROZEN

Estados são determinísticos e explícitos; os terminais não têm saída.
"""

from enum import StrEnum


class AssemblerState(StrEnum):
    """
    Estados do montador de mensagens.

    Estados:
        - UNBUILT: Acumulando endereços, headers e conteúdo
        - COMPOSED: Mensagem final emitida (terminal)
    """

    UNBUILT = "UNBUILT"
    COMPOSED = "COMPOSED"

    def __str__(self) -> str:
        return self.value


class SessionConfigState(StrEnum):
    """
    Estados da configuração de sessão.

    Estados:
        - CONFIGURABLE: Setters aceitam alterações
        - FROZEN: Sessão criada; qualquer alteração falha (terminal)
    """

    CONFIGURABLE = "CONFIGURABLE"
    FROZEN = "FROZEN"

    def __str__(self) -> str:
        return self.value


LifecycleState = AssemblerState | SessionConfigState

# Uma vez em estado terminal, o objeto não pode transitar para outro estado
TERMINAL_STATES: frozenset[LifecycleState] = frozenset({
    AssemblerState.COMPOSED,
    SessionConfigState.FROZEN,
})

# Estado inicial de cada família
INITIAL_STATES: frozenset[LifecycleState] = frozenset({
    AssemblerState.UNBUILT,
    SessionConfigState.CONFIGURABLE,
})


def is_terminal(state: LifecycleState) -> bool:
    """
    Verifica se o estado é terminal.

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado é terminal, False caso contrário
    """
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    """
    Verifica se o valor pertence a uma das famílias de estado.

    Args:
        state: Valor a ser verificado

    Returns:
        True se é AssemblerState ou SessionConfigState
    """
    return isinstance(state, (AssemblerState, SessionConfigState))
