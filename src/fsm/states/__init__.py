"""
Exports públicos do módulo fsm/states.

Estados de ciclo de vida do montador e da configuração de sessão.
"""

from fsm.states.lifecycle import (
    INITIAL_STATES,
    TERMINAL_STATES,
    AssemblerState,
    LifecycleState,
    SessionConfigState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "AssemblerState",
    "LifecycleState",
    "SessionConfigState",
    "is_terminal",
    "is_valid_state",
]
