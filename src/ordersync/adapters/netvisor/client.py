"""Live Netvisor sink: signs and submits sales-order documents."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ordersync.adapters.http_resilience import ResilientClient
from ordersync.domain.errors import FatalApiError
from ordersync.domain.model import SubmissionReceipt

from .response import extract_destination_key, response_status
from .signing import RequestSigner

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from ordersync.config.netvisor import NetvisorConfig

log = getLogger(__name__)

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


class NetvisorClient:
    """Submits documents to ``salesinvoice.nv`` through the resilient executor."""

    def __init__(
        self,
        config: NetvisorConfig,
        *,
        client: ResilientClient | None = None,
        signer: RequestSigner | None = None,
    ) -> None:
        self.config = config
        self._client = client or ResilientClient(config.resilience)
        self._signer = signer or RequestSigner(config.auth, debug=config.debug_auth)

    def __enter__(self) -> NetvisorClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def submit(self, document: str, *, order_id: str) -> SubmissionReceipt:
        url = self.config.sales_invoice_url
        payload = document.encode("utf-8")

        def build_request() -> httpx.Request:
            headers = self._signer.sign("POST", url, document)
            headers["Content-Type"] = XML_CONTENT_TYPE
            return self._client.build_request("POST", url, content=payload, headers=headers)

        response = self._client.execute(build_request)

        # Without status-code mode Netvisor reports failures inside a 200 body.
        if response_status(response.text) == "FAILED":
            log.error(
                "Netvisor rejected order %s: status=%s body=%s",
                order_id,
                response.status,
                response.text[:500],
            )
            raise FatalApiError(
                "Netvisor API error: response status FAILED",
                status=response.status,
                body=response.text,
            )

        key = extract_destination_key(response.text)
        log.debug("Netvisor accepted order %s: status=%s key=%s", order_id, response.status, key)
        return SubmissionReceipt(status=response.status, body=response.text, netvisor_key=key)
