"""Python client for the Task Tracker API with transparent session renewal."""
from client.api_client import ApiClient, AsyncApiClient
from client.errors import ApiError, SessionExpiredError
from client.interceptor import SessionRenewalAuth
from client.services import AuthService, TaskService
from client.session import ClientSession
from client.storage import FileTokenStorage, MemoryTokenStorage, TokenStorage

__all__ = [
    "ApiClient",
    "AsyncApiClient",
    "ApiError",
    "AuthService",
    "ClientSession",
    "FileTokenStorage",
    "MemoryTokenStorage",
    "SessionExpiredError",
    "SessionRenewalAuth",
    "TaskService",
    "TokenStorage",
]
