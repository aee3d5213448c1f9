"""
HTTP clients for the clinic backend and the WhatsApp gateway.
"""

from .http_client import HttpClient, ApiClient, clean_params, unwrap
from .whatsapp_gateway import WhatsAppGatewayClient

__all__ = [
    "HttpClient",
    "ApiClient",
    "clean_params",
    "unwrap",
    "WhatsAppGatewayClient",
]
