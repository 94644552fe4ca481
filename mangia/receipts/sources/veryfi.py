"""Veryfi document-extraction source (structured path)."""

from __future__ import annotations

import logging
import time

import httpx

from ..errors import RecognitionFailure
from ..models import (
    UNKNOWN_ITEM,
    ReceiptDocument,
    ReceiptImage,
    ReceiptLineItem,
    to_money,
    to_quantity,
)
from . import ExtractionSource, line_entries, vendor_fields

logger = logging.getLogger(__name__)


class VeryfiSource(ExtractionSource):
    """Send the receipt to Veryfi and map the returned document."""

    name = "veryfi"

    def __init__(
        self,
        client_id: str = "",
        username: str = "",
        api_key: str = "",
        url: str = "https://api.veryfi.com/api/v8/partner/documents",
        categories: list[str] | None = None,
        auto_delete: bool = True,
        timeout: float = 25.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._username = username
        self._api_key = api_key
        self._url = url
        self._categories = categories if categories is not None else ["Grocery", "Food"]
        self._auto_delete = auto_delete
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Client-Id": self._client_id,
            "Authorization": f"apikey {self._username}:{self._api_key}",
        }

    async def extract(self, image: ReceiptImage) -> ReceiptDocument:
        if not (self._client_id and self._username and self._api_key):
            raise ValueError(
                "Veryfi credentials are not set. Check the config file or the "
                "VERYFI_CLIENT_ID / VERYFI_AUTH_USERNAME / VERYFI_AUTH_APIKEY "
                "environment variables."
            )

        payload = {
            "file_name": f"receipt_{int(time.time() * 1000)}.jpg",
            "file_data": image.b64(),
            "categories": self._categories,
            "auto_delete": self._auto_delete,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._url, json=payload, headers=self._headers()
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Veryfi returned %s: %s", e.response.status_code, e.response.text
            )
            raise RecognitionFailure(
                f"Veryfi returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Veryfi request failed: %s", e)
            raise RecognitionFailure(f"Veryfi request failed: {e}") from e
        except ValueError as e:
            raise RecognitionFailure(f"Veryfi returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RecognitionFailure("Veryfi returned an unexpected payload")
        return _map_document(data)


def _map_document(data: dict) -> ReceiptDocument:
    """Map a Veryfi document response to a ``ReceiptDocument``."""
    vendor_name, vendor_address = vendor_fields(data.get("vendor"))
    items = tuple(
        ReceiptLineItem(
            name=(str(line.get("description") or "").strip() or UNKNOWN_ITEM),
            quantity=to_quantity(line.get("quantity")),
            price=to_money(line.get("price")),
            total=to_money(line.get("total")),
        )
        for line in line_entries(data.get("line_items"))
    )
    document_id = data.get("id")
    date = data.get("date")
    ocr_text = data.get("ocr_text")
    return ReceiptDocument(
        items=items,
        vendor_name=vendor_name,
        vendor_address=vendor_address,
        date=str(date) if date else None,
        subtotal=to_money(data.get("subtotal")),
        tax=to_money(data.get("tax")),
        total=to_money(data.get("total")),
        raw_text=ocr_text if isinstance(ocr_text, str) else "",
        document_id=str(document_id) if document_id is not None else None,
        source=VeryfiSource.name,
    )
