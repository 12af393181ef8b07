"""Services package - Backend collaborators and workflow orchestration."""

from .credentials import (
    CredentialProvider,
    NoCredentials,
    StaticTokenCredentials,
    GoogleIdTokenCredentials,
    create_credential_provider
)
from .backend_client import BackendClient, BackendResponse
from .ocr_service import OCRService
from .account_service import AccountService, normalize_email
from .session_store import SessionStore
from .workflow_service import WorkflowController

__all__ = [
    'CredentialProvider',
    'NoCredentials',
    'StaticTokenCredentials',
    'GoogleIdTokenCredentials',
    'create_credential_provider',
    'BackendClient',
    'BackendResponse',
    'OCRService',
    'AccountService',
    'normalize_email',
    'SessionStore',
    'WorkflowController'
]
