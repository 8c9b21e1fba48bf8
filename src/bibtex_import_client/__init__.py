from .client import BibtexImportClient
from .config import ClientSettings
from .errors import ServiceConnectionError
from .models import ImportResponse, SubmitResult

__all__ = [
    "BibtexImportClient",
    "ClientSettings",
    "ImportResponse",
    "ServiceConnectionError",
    "SubmitResult",
]
