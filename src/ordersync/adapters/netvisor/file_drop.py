"""Offline sink that writes each sales-order document to disk."""

from __future__ import annotations

import os
import re
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from ordersync.domain.errors import FatalApiError
from ordersync.domain.model import SubmissionReceipt

if TYPE_CHECKING:
    from .signing import RequestSigner

log = getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def document_filename(order_id: str) -> str:
    """``gid://shopify/Order/42`` becomes ``gid_shopify_Order_42.xml``."""

    stem = _UNSAFE_FILENAME_CHARS.sub("_", order_id).strip("._") or "order"
    return f"{stem}.xml"


class FileDropSalesOrderSink:
    """Stands in for Netvisor when running in mock mode.

    Documents land in ``out_dir`` and the receipt carries no destination key.
    When a signer is given the request is still signed, so the signing path runs
    offline and its header names show up in debug logs.
    """

    def __init__(
        self,
        out_dir: Path,
        *,
        signer: RequestSigner | None = None,
        url: str = "",
    ) -> None:
        self.out_dir = Path(out_dir)
        self._signer = signer
        self._url = url

    def submit(self, document: str, *, order_id: str) -> SubmissionReceipt:
        if self._signer is not None:
            headers = self._signer.sign("POST", self._url, document)
            log.debug("Mock Netvisor headers for %s: %s", order_id, ", ".join(sorted(headers)))

        target = self.out_dir / document_filename(order_id)
        tmp_path = target.with_name(target.name + ".tmp")
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(document, encoding="utf-8")
            os.replace(tmp_path, target)
        except OSError as exc:
            raise FatalApiError(f"Could not write mock Netvisor document {target}: {exc}") from exc

        log.info("Mock Netvisor: wrote %s", target)
        return SubmissionReceipt(status=200, body="", netvisor_key="")
