"""
獎勵發放服務 client

transfer(recipient_id, amount) 永遠回傳 TransferResult，不拋異常：
轉帳服務失敗時回傳 status=error，由呼叫端決定如何記錄
"""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from core.exceptions import RewardTransferFailure
from models import TransferStatus
from schemas import TransferResult

logger = logging.getLogger(__name__)


class RewardDistributor:
    def __init__(self, service_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.service_url = (service_url or "").strip()
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post_transfer(self, recipient_id: str, amount: float) -> TransferResult:
        if not self.service_url:
            raise RewardTransferFailure("Reward service URL not configured")

        try:
            resp = await self._client.post(
                self.service_url,
                json={"recipient": recipient_id, "amount": amount},
            )
            resp.raise_for_status()
            result = TransferResult.model_validate(resp.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise RewardTransferFailure(str(e)) from e

        if result.status == TransferStatus.SUCCESS and not result.receipt:
            raise RewardTransferFailure("Transfer reported success without a receipt")
        return result

    async def transfer(self, recipient_id: str, amount: float) -> TransferResult:
        """
        發放獎勵給冠軍（只嘗試一次，不自動重試）

        返回：
            TransferResult；失敗時 status=error、receipt=None、message 為原因
        """
        try:
            result = await self._post_transfer(recipient_id, amount)
        except RewardTransferFailure as e:
            logger.error(f"Failed to distribute reward to {recipient_id}: {e}")
            return TransferResult(
                status=TransferStatus.ERROR,
                receipt=None,
                message=f"Failed to distribute reward: {e}",
            )

        if result.status == TransferStatus.ERROR:
            logger.error(f"Reward service rejected transfer to {recipient_id}: {result.message}")
            return TransferResult(status=TransferStatus.ERROR, receipt=None, message=result.message)

        logger.info(f"Transferred {amount} to {recipient_id}, receipt={result.receipt}")
        return result
