"""Request signing for the Netvisor API.

Every request carries identity headers plus a MAC computed over a canonical
string built from the request metadata. The canonical form used here is a
stand-in for the one in Netvisor's documentation; it lives behind the
:class:`MacCalculator` protocol so the authoritative algorithm can be dropped in
without touching the client or the retry logic.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from ordersync.domain.timestamps import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable

    from ordersync.config.netvisor import NetvisorAuth
    from ordersync.domain.timestamps import Clock

log = getLogger(__name__)

CANONICAL_DELIMITER = "&"

HEADER_SENDER = "X-Netvisor-Authentication-Sender"
HEADER_PARTNER_ID = "X-Netvisor-Authentication-PartnerId"
HEADER_CUSTOMER_ID = "X-Netvisor-Authentication-CustomerId"
HEADER_TOKEN = "X-Netvisor-Authentication-Token"
HEADER_TIMESTAMP = "X-Netvisor-Authentication-Timestamp"
HEADER_TRANSACTION_ID = "X-Netvisor-Authentication-TransactionId"
HEADER_MAC_ALGORITHM = "X-Netvisor-Authentication-MACHashCalculationAlgorithm"
HEADER_MAC = "X-Netvisor-Authentication-MAC"
HEADER_LANGUAGE = "X-Netvisor-Interface-Language"
HEADER_ORGANISATION_ID = "X-Netvisor-Organisation-ID"
HEADER_USE_STATUS_CODES = "X-Netvisor-Authentication-UseHTTPResponseStatusCodes"


@dataclass(frozen=True, slots=True)
class SigningInput:
    method: str
    url: str
    timestamp: str
    transaction_id: str
    payload: str

    @property
    def payload_digest(self) -> str:
        return hashlib.sha256(self.payload.encode("utf-8")).hexdigest()


class MacCalculator(Protocol):
    def __call__(self, signing_input: SigningInput, auth: NetvisorAuth) -> str: ...


def canonical_string(signing_input: SigningInput, auth: NetvisorAuth) -> str:
    return CANONICAL_DELIMITER.join(
        (
            signing_input.method.upper(),
            signing_input.url,
            auth.sender,
            auth.customer_id,
            auth.partner_id,
            signing_input.timestamp,
            signing_input.transaction_id,
            signing_input.payload_digest,
        )
    )


def hmac_sha256_mac(signing_input: SigningInput, auth: NetvisorAuth) -> str:
    digest = hmac.new(
        auth.mac_key.encode("utf-8"),
        canonical_string(signing_input, auth).encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def new_transaction_id() -> str:
    return secrets.token_hex(16)


def netvisor_timestamp(clock: Clock = utcnow) -> str:
    return clock().strftime("%Y-%m-%dT%H:%M:%S")


class RequestSigner:
    """Produces the full Netvisor authentication header set for one request.

    The timestamp and transaction id are captured on every call, so a request
    rebuilt for a retry is signed afresh.
    """

    def __init__(
        self,
        auth: NetvisorAuth,
        *,
        mac_calculator: MacCalculator = hmac_sha256_mac,
        clock: Clock = utcnow,
        transaction_ids: Callable[[], str] = new_transaction_id,
        debug: bool = False,
    ) -> None:
        self.auth = auth
        self._mac_calculator = mac_calculator
        self._clock = clock
        self._transaction_ids = transaction_ids
        self._debug = debug

    def sign(self, method: str, url: str, payload: str) -> dict[str, str]:
        signing_input = SigningInput(
            method=method,
            url=url,
            timestamp=netvisor_timestamp(self._clock),
            transaction_id=self._transaction_ids(),
            payload=payload,
        )
        mac = self._mac_calculator(signing_input, self.auth)

        if self._debug:
            log.debug(
                "Netvisor signing: method=%s url=%s timestamp=%s transaction_id=%s payload_sha256=%s",
                signing_input.method,
                signing_input.url,
                signing_input.timestamp,
                signing_input.transaction_id,
                signing_input.payload_digest,
            )

        headers = {
            HEADER_SENDER: self.auth.sender,
            HEADER_PARTNER_ID: self.auth.partner_id,
            HEADER_CUSTOMER_ID: self.auth.customer_id,
            HEADER_TOKEN: self.auth.token,
            HEADER_TIMESTAMP: signing_input.timestamp,
            HEADER_TRANSACTION_ID: signing_input.transaction_id,
            HEADER_MAC_ALGORITHM: self.auth.mac_algorithm,
            HEADER_MAC: mac,
            HEADER_LANGUAGE: self.auth.language,
        }
        if self.auth.organization_id:
            headers[HEADER_ORGANISATION_ID] = self.auth.organization_id
        if self.auth.use_http_status_codes:
            headers[HEADER_USE_STATUS_CODES] = "1"
        return headers
