# Test log redaction
from src.myitmo.logging import redact_secrets


class TestRedactSecrets:
    def test_sensitive_values_masked(self):
        event = {
            "event": "x",
            "username": "alice",
            "password": "hunter2",
            "access_token": "T123",
            "code": "ABC",
        }
        result = redact_secrets(None, "info", event)
        assert result["username"] == "alice"
        assert result["password"] == "***"
        assert result["access_token"] == "***"
        assert result["code"] == "***"

    def test_untouched_without_secrets(self):
        event = {"event": "schedule_fetched", "lessons": 3}
        assert redact_secrets(None, "info", dict(event)) == event
