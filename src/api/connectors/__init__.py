"""Connectors: adapters de borda.

Estrutura:
- receiver/: gates de credencial (webhook e receiver) e parse do body
"""

__all__: list[str] = []
