"""API: camada de borda do relay.

Responsabilidades:
- Receber requests do serviço receiver (webhook e endpoints de mensagens)
- Validar credenciais compartilhadas
- Normalizar payloads para MessageRecord

Subpastas:
- connectors/: gates de credencial e parse do body
- normalizers/: sanitização e conversão payload → MessageRecord
- routes/: endpoints HTTP (webhook, receiver, health)

NÃO PODE conter: filas, workers, regras de retry.
"""
