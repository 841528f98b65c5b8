"""
Exports públicos do módulo fsm/manager.

Máquina de estados (DeliveryStateMachine) para entrega de itens.
"""

from fsm.manager.machine import DeliveryStateMachine, create_delivery_fsm

__all__ = [
    "DeliveryStateMachine",
    "create_delivery_fsm",
]
