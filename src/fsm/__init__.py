"""
Módulo FSM: Máquina de Estados de ciclo de vida.

Governa as transições one-shot do montador de mensagens
(UNBUILT → COMPOSED) e da configuração de sessão
(CONFIGURABLE → FROZEN).

Estrutura:
    - states/: Definições dos estados (AssemblerState, SessionConfigState)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (FSMStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Manager
from fsm.manager import (
    FSMStateMachine,
    create_fsm,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)

# Estados
from fsm.states import (
    INITIAL_STATES,
    TERMINAL_STATES,
    AssemblerState,
    LifecycleState,
    SessionConfigState,
    is_terminal,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "AssemblerState",
    "FSMStateMachine",
    "GuardResult",
    "LifecycleState",
    "SessionConfigState",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
