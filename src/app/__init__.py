"""App: núcleo do relay (filas, workers e infraestrutura).

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: MessageRecord
- queue/: lanes, itens e despacho
- workers/: worker de entrega e pool
- infra/: backends de fila e handlers downstream
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
