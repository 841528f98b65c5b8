"""Rotas inbound do serviço receiver."""
