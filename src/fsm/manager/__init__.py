"""
Exports públicos do módulo fsm/manager.

Máquina de estados (FSMStateMachine) para objetos one-shot.
"""

from fsm.manager.machine import (
    FSMStateMachine,
    create_fsm,
)

__all__ = [
    "FSMStateMachine",
    "create_fsm",
]
