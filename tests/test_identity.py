import pytest
from google.auth import exceptions as google_exceptions

from rise.errors import AuthorizationError, ConfigurationError, UpstreamError
from rise.services import identity
from rise.services.identity import IdentityResolver


@pytest.fixture
def resolver(config, store):
    # no injected verifier: exercises the google-auth path
    return IdentityResolver(config, store)


def test_token_audience_is_the_configured_client(resolver, store, config, monkeypatch):
    calls = []

    def verify(credential, request, audience=None):
        calls.append((credential, audience))
        return {"email": "mentor@example.com"}

    monkeypatch.setattr(identity.id_token, "verify_oauth2_token", verify)
    store.add(config.CONTACT_BASE_ID, "Mentors", {"Email": "mentor@example.com"})
    assert resolver.verify_identity_token("tok")["role"] == "Mentor"
    assert calls == [("tok", "test-client-id.apps.googleusercontent.com")]


def test_missing_client_id_refuses_to_verify(resolver, config, monkeypatch):
    def verify(*args, **kwargs):
        raise AssertionError("token must not be checked without an audience")

    monkeypatch.setattr(identity.id_token, "verify_oauth2_token", verify)
    config.GOOGLE_CLIENT_ID = None
    with pytest.raises(ConfigurationError) as excinfo:
        resolver.verify_identity_token("tok")
    assert "GOOGLE_CLIENT_ID" in excinfo.value.message


def test_certificate_fetch_failure_is_retryable_upstream_error(resolver, monkeypatch):
    def verify(*args, **kwargs):
        raise google_exceptions.TransportError("connection reset")

    monkeypatch.setattr(identity.id_token, "verify_oauth2_token", verify)
    with pytest.raises(UpstreamError) as excinfo:
        resolver.verify_identity_token("tok")
    assert excinfo.value.retryable is True
    assert excinfo.value.status_code == 502


@pytest.mark.parametrize(
    "error", [ValueError("Token expired"), google_exceptions.GoogleAuthError("Wrong issuer")]
)
def test_rejected_token_is_forbidden(resolver, monkeypatch, error):
    def verify(*args, **kwargs):
        raise error

    monkeypatch.setattr(identity.id_token, "verify_oauth2_token", verify)
    with pytest.raises(AuthorizationError):
        resolver.verify_identity_token("tok")
