"""
Guards e invariantes para transições de ciclo de vida.

Guards podem bloquear uma transição que o mapa permitiria,
retornando o motivo do bloqueio.
"""

from collections.abc import Callable

from fsm.states.lifecycle import TERMINAL_STATES, LifecycleState, is_valid_state


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[LifecycleState, LifecycleState], GuardResult]


def guard_valid_state(
    from_state: LifecycleState,
    to_state: LifecycleState,
) -> GuardResult:
    """
    Guard: Verifica se ambos os estados são válidos.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if not is_valid_state(from_state):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")

    if not is_valid_state(to_state):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")

    return GuardResult.allow()


def guard_terminal_state(
    from_state: LifecycleState,
    to_state: LifecycleState,
) -> GuardResult:
    """
    Guard: Estados terminais não permitem saída.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino (não usado, mas necessário para assinatura)

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: LifecycleState,
    to_state: LifecycleState,
) -> GuardResult:
    """Guard: Transição reflexiva nunca é permitida."""
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


def guard_same_family(
    from_state: LifecycleState,
    to_state: LifecycleState,
) -> GuardResult:
    """Guard: Montador e sessão não trocam de família de estado."""
    if type(from_state) is not type(to_state):
        return GuardResult.deny(
            f"Transição entre famílias não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


# Aplicados em ordem; todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
    guard_same_family,
]


def evaluate_guards(
    from_state: LifecycleState,
    to_state: LifecycleState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
