"""Testes dos gates de credencial (webhook e receiver)."""

from __future__ import annotations

import logging

import pytest

from api.connectors.receiver import (
    RECEIVER_SOURCES,
    WEBHOOK_SOURCES,
    AuthDecision,
    CallerInfo,
    build_receiver_gate,
    build_webhook_gate,
    credentials_match,
    extract_credential,
)
from utils.errors import AuthFailureError, ServiceUnavailableError

SECRET = "s3cr3t-value"


class TestExtractCredential:
    """Ordem de precedência das fontes."""

    def test_webhook_header_wins_over_body(self) -> None:
        headers = {"X-Webhook-Secret": "from-header"}
        body = {"webhook_secret": "from-body"}
        assert extract_credential(WEBHOOK_SOURCES, headers, body) == "from-header"

    def test_webhook_falls_back_through_sources(self) -> None:
        assert extract_credential(WEBHOOK_SOURCES, {"x-api-key": "k"}) == "k"
        assert (
            extract_credential(WEBHOOK_SOURCES, {"authorization": "Bearer tok"}) == "tok"
        )
        assert extract_credential(WEBHOOK_SOURCES, {}, {"webhook_secret": "b"}) == "b"

    def test_empty_header_skipped(self) -> None:
        headers = {"x-webhook-secret": "", "x-api-key": "k"}
        assert extract_credential(WEBHOOK_SOURCES, headers) == "k"

    def test_bearer_prefix_only_stripped_when_present(self) -> None:
        assert extract_credential(RECEIVER_SOURCES, {"authorization": "Bearer abc"}) == "abc"
        assert extract_credential(RECEIVER_SOURCES, {"authorization": "abc"}) == "abc"

    def test_receiver_ignores_body(self) -> None:
        assert extract_credential(RECEIVER_SOURCES, {}, {"webhook_secret": SECRET}) is None

    def test_non_string_body_value_ignored(self) -> None:
        assert extract_credential(WEBHOOK_SOURCES, {}, {"webhook_secret": 123}) is None


class TestCredentialsMatch:
    def test_exact_match(self) -> None:
        assert credentials_match(SECRET, SECRET) is True

    def test_single_character_difference(self) -> None:
        assert credentials_match(SECRET, SECRET[:-1] + "X") is False

    def test_missing_credential(self) -> None:
        assert credentials_match(SECRET, None) is False


class TestWebhookGate:
    def test_valid_secret_allowed(self) -> None:
        gate = build_webhook_gate(SECRET, production_mode=True)
        result = gate.authorize({"x-webhook-secret": SECRET})
        assert result.decision == AuthDecision.ALLOW
        assert result.allowed is True

    def test_body_secret_allowed(self) -> None:
        gate = build_webhook_gate(SECRET, production_mode=True)
        result = gate.authorize({}, {"webhook_secret": SECRET})
        assert result.decision == AuthDecision.ALLOW

    def test_mismatch_rejected_with_401(self) -> None:
        gate = build_webhook_gate(SECRET, production_mode=False)
        result = gate.authorize({"x-webhook-secret": SECRET + "x"})
        assert result.decision == AuthDecision.REJECT
        assert result.status_code == 401
        assert result.reason == "invalid_credential"

    def test_missing_credential_reason(self) -> None:
        gate = build_webhook_gate(SECRET, production_mode=False)
        assert gate.authorize({}).reason == "missing_credential"

    def test_enforce_raises_auth_failure(self) -> None:
        gate = build_webhook_gate(SECRET, production_mode=False)
        with pytest.raises(AuthFailureError, match="Invalid webhook secret"):
            gate.enforce({"authorization": "Bearer wrong"})

    def test_rejection_log_omits_credential(self, caplog: pytest.LogCaptureFixture) -> None:
        gate = build_webhook_gate(SECRET, production_mode=False)
        caller = CallerInfo(ip="10.0.0.1", user_agent="curl/8", url="/api/whatsapp/webhook")

        with caplog.at_level(logging.WARNING):
            gate.authorize({"x-webhook-secret": "leaked-guess"}, caller=caller)

        rejected = [r for r in caplog.records if r.message == "auth_rejected"]
        assert len(rejected) == 1
        assert rejected[0].ip == "10.0.0.1"
        assert rejected[0].gate == "webhook"
        for record in caplog.records:
            dumped = str(record.__dict__)
            assert "leaked-guess" not in dumped
            assert SECRET not in dumped


class TestUnconfiguredSecret:
    def test_non_production_allows_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        gate = build_receiver_gate("", production_mode=False)

        with caplog.at_level(logging.CRITICAL):
            result = gate.authorize({})

        assert result.decision == AuthDecision.ALLOW_WITH_WARNING
        assert result.allowed is True
        assert any(r.message == "auth_secret_not_configured" for r in caplog.records)

    def test_production_rejects_with_503(self) -> None:
        gate = build_receiver_gate("", production_mode=True)
        result = gate.authorize({"x-api-key": "anything"})
        assert result.decision == AuthDecision.REJECT
        assert result.status_code == 503

    def test_production_enforce_raises_service_unavailable(self) -> None:
        gate = build_webhook_gate("", production_mode=True)
        with pytest.raises(ServiceUnavailableError):
            gate.enforce({})


class TestReceiverGate:
    def test_api_key_header(self) -> None:
        gate = build_receiver_gate(SECRET, production_mode=True)
        assert gate.authorize({"X-API-Key": SECRET}).decision == AuthDecision.ALLOW

    def test_enforce_message(self) -> None:
        gate = build_receiver_gate(SECRET, production_mode=True)
        with pytest.raises(AuthFailureError, match="Invalid API key"):
            gate.enforce({"x-api-key": "nope"})
