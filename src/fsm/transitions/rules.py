"""
Regras de transição válidas entre estados de ciclo de vida.

Cada família de estados tem exatamente uma transição possível, da
fase mutável para a fase congelada.
"""

from fsm.states.lifecycle import (
    TERMINAL_STATES,
    AssemblerState,
    LifecycleState,
    SessionConfigState,
)

# Tipagem explícita do mapa de transições
TransitionMap = dict[LifecycleState, frozenset[LifecycleState]]

# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # Montador: compose() é one-shot
    AssemblerState.UNBUILT: frozenset({AssemblerState.COMPOSED}),
    AssemblerState.COMPOSED: frozenset(),

    # Configuração de sessão: congela na criação da sessão
    SessionConfigState.CONFIGURABLE: frozenset({SessionConfigState.FROZEN}),
    SessionConfigState.FROZEN: frozenset(),
}


def get_valid_targets(state: LifecycleState) -> frozenset[LifecycleState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: LifecycleState, to_state: LifecycleState) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    if from_state in TERMINAL_STATES:
        return False

    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados das duas famílias estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhuma transição cruza famílias de estado

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for family in (AssemblerState, SessionConfigState):
        for state in family:
            if state not in VALID_TRANSITIONS:
                errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if type(target) is not type(from_state):
                errors.append(
                    f"Transição {from_state.name} → {target}: família de estado diferente"
                )

    return errors
