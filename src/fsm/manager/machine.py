"""
Máquina de estados (FSMStateMachine) para objetos one-shot.

Controla o ciclo de vida do montador de mensagens e da configuração
de sessão, validando transições e mantendo histórico rastreável.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.lifecycle import (
    INITIAL_STATES,
    LifecycleState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class FSMStateMachine:
    """
    Máquina de estados de ciclo de vida.

    Não é thread-safe: o dono do objeto deve serializar o acesso.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_owner_id")

    def __init__(
        self,
        initial_state: LifecycleState,
        owner_id: str = "",
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_state: Estado inicial (deve pertencer a INITIAL_STATES)
            owner_id: Identificador do objeto dono, usado em logs

        Raises:
            ValueError: Se o estado inicial não é um estado de entrada
        """
        if initial_state not in INITIAL_STATES:
            raise ValueError(f"Estado inicial inválido: {initial_state}")
        self._current_state = initial_state
        self._history: list[StateTransition] = []
        self._owner_id = owner_id

    @property
    def current_state(self) -> LifecycleState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def owner_id(self) -> str:
        """Identificador do objeto dono."""
        return self._owner_id

    @property
    def is_terminal(self) -> bool:
        """Verifica se está em estado terminal."""
        return is_terminal(self._current_state)

    def can_transition_to(self, target: LifecycleState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[LifecycleState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: LifecycleState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'compose')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "owner_id": self._owner_id,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    initial_state: LifecycleState,
    owner_id: str = "",
) -> FSMStateMachine:
    """
    Factory function para criar uma FSM.

    Args:
        initial_state: Estado inicial
        owner_id: Identificador do objeto dono

    Returns:
        FSMStateMachine configurada
    """
    return FSMStateMachine(initial_state=initial_state, owner_id=owner_id)
