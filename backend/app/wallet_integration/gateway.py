"""
YaYa Wallet Gateway

Issues signed requests to the YaYa Wallet API and maps the results into
the internal PaginatedTransactions contract.

Each call is single-shot: no retries, no caching. Any transport failure or
non-2xx response is logged and raised as WalletGatewayError; upstream error
bodies are never forwarded to the caller.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from backend.app.schemas import PaginatedTransactions, Pagination, Transaction
from .normalization import normalize_transactions, parse_number
from .signing import RequestSigner

logger = logging.getLogger(__name__)


class WalletGatewayError(Exception):
    """Raised when the YaYa Wallet API call fails for any reason."""

    status_code = 502

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class YayaWalletGateway:
    """
    YaYa Wallet transaction API integration.

    Supported operations:
    - fetch_by_user: GET /api/en/transaction/find-by-user
    - search_by_query: POST /api/en/transaction/search
    """

    FIND_BY_USER_ENDPOINT = "/api/en/transaction/find-by-user"
    SEARCH_ENDPOINT = "/api/en/transaction/search"

    FETCH_FAILED_MESSAGE = "Failed to fetch transactions from YaYa Wallet API"
    SEARCH_FAILED_MESSAGE = "Failed to search transactions from YaYa Wallet API"

    def __init__(self, settings, signer: Optional[RequestSigner] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize gateway from immutable application settings.

        Args:
            settings: Settings instance (credentials, base URL, page parameter name)
            signer: Optional pre-built signer (defaults to one using settings credentials)
            transport: Optional httpx transport, used by tests to stub the upstream
        """
        self.settings = settings
        self.base_url = settings.yaya_api_base_url
        self.page_param = settings.yaya_page_param
        self.signer = signer or RequestSigner(settings.yaya_api_key, settings.yaya_api_secret)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if self._transport is not None:
            return httpx.AsyncClient(transport=self._transport)
        return httpx.AsyncClient()

    async def fetch_by_user(self, page: int = 1, limit: int = 10) -> PaginatedTransactions:
        """
        Fetch the account owner's transactions, one page at a time.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            PaginatedTransactions with normalized records

        Raises:
            WalletGatewayError: On any transport or upstream failure
        """
        endpoint = self.FIND_BY_USER_ENDPOINT
        params = {self.page_param: page, "limit": limit}

        logger.info(f"Fetching transactions: page={page}, limit={limit}")

        payload = await self._request(
            "GET", endpoint, params=params, failure_message=self.FETCH_FAILED_MESSAGE
        )

        raw_list = payload.get("data") if isinstance(payload, dict) else None
        transactions = normalize_transactions(raw_list or [])

        logger.info(f"Fetched {len(transactions)} transactions (page {page})")
        return self._paginate(payload, transactions, page, limit)

    async def search_by_query(self, query: str, page: int = 1, limit: int = 10) -> PaginatedTransactions:
        """
        Search transactions by sender/receiver account, name or transaction id.

        The serialized body is signed and sent byte-for-byte; any difference
        between the two would invalidate the signature upstream.

        Args:
            query: Search term
            page: 1-based page number (sent as URL parameter)
            limit: Page size (sent as URL parameter)

        Returns:
            PaginatedTransactions with normalized records

        Raises:
            WalletGatewayError: On any transport or upstream failure
        """
        endpoint = self.SEARCH_ENDPOINT
        body = serialize_body({"query": query})

        logger.info(f"Searching transactions: page={page}, limit={limit}")

        payload = await self._request(
            "POST", endpoint,
            params={"page": page, "limit": limit},
            body=body,
            failure_message=self.SEARCH_FAILED_MESSAGE
        )

        # Upstream may nest the list under "data" or return it directly
        raw_list = payload.get("data") if isinstance(payload, dict) else None
        if raw_list is None:
            raw_list = payload
        transactions = normalize_transactions(raw_list)

        logger.info(f"Search returned {len(transactions)} transactions (page {page})")
        return self._paginate(payload, transactions, page, limit)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any],
        failure_message: str,
        body: str = ""
    ) -> Any:
        # Headers are built immediately before sending: upstream enforces a freshness window
        headers = self.signer.build_headers(method, endpoint, body)
        url = f"{self.base_url}{endpoint}"

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    headers=headers,
                    content=body.encode("utf-8") if body else None
                )

                if not response.is_success:
                    logger.error(f"YaYa Wallet API error - Status: {response.status_code}")
                    logger.error(f"Response body: {response.text}")
                    logger.error(f"Request: {method} {endpoint} params={params}")
                    raise WalletGatewayError(failure_message)

                return response.json()

        except WalletGatewayError:
            raise
        except httpx.HTTPError as e:
            logger.error(f"YaYa Wallet API request failed: {method} {endpoint}: {e!r}")
            raise WalletGatewayError(failure_message) from e
        except ValueError as e:
            logger.error(f"YaYa Wallet API returned invalid JSON for {method} {endpoint}: {e}")
            raise WalletGatewayError(failure_message) from e

    def _paginate(
        self,
        payload: Any,
        transactions: List[Transaction],
        page: int,
        limit: int
    ) -> PaginatedTransactions:
        meta = payload if isinstance(payload, dict) else {}

        upstream_total = parse_number(meta.get("total"))
        total = int(upstream_total) if upstream_total else len(transactions)

        last_page = parse_number(meta.get("lastPage"))
        total_pages = int(last_page) if last_page else math.ceil(total / limit)

        return PaginatedTransactions(
            data=transactions,
            pagination=Pagination(
                page=int(page),
                limit=int(limit),
                total=total,
                totalPages=total_pages
            ),
            incomingSum=meta.get("incomingSum"),
            outgoingSum=meta.get("outgoingSum"),
            lastPage=meta.get("lastPage"),
            perPage=meta.get("perPage")
        )


def serialize_body(data: Dict[str, Any]) -> str:
    """Compact JSON serialization used for both signing and transmission."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
