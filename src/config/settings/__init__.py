"""Agregador de settings do Remessa.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# Email settings
from config.settings.email import (
    DEFAULT_SMTP_PORT,
    DEFAULT_SOCKET_TIMEOUT_MS,
    DEFAULT_SSL_SMTP_PORT,
    EnvironmentDefaults,
    get_environment_defaults,
)

__all__ = [
    "DEFAULT_SMTP_PORT",
    "DEFAULT_SOCKET_TIMEOUT_MS",
    "DEFAULT_SSL_SMTP_PORT",
    "BaseSettings",
    "Environment",
    "EnvironmentDefaults",
    "get_base_settings",
    "get_environment_defaults",
]
