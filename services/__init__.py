"""Token lifecycle and the credential orchestrator."""
from services.credentials import AuthResult, CredentialService
from services.refresh_tokens import RefreshTokenManager

__all__ = ["AuthResult", "CredentialService", "RefreshTokenManager"]
