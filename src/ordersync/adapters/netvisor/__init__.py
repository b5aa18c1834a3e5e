from .client import NetvisorClient
from .file_drop import FileDropSalesOrderSink, document_filename
from .mapping import format_money, map_sales_order
from .response import extract_destination_key, find_element_text, response_status
from .signing import (
    MacCalculator,
    RequestSigner,
    SigningInput,
    canonical_string,
    hmac_sha256_mac,
)

__all__ = [
    "FileDropSalesOrderSink",
    "MacCalculator",
    "NetvisorClient",
    "RequestSigner",
    "SigningInput",
    "canonical_string",
    "document_filename",
    "extract_destination_key",
    "find_element_text",
    "format_money",
    "hmac_sha256_mac",
    "map_sales_order",
    "response_status",
]
