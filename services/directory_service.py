"""
參賽者名單服務 client

向名單服務 GET 目前訂閱中的參賽者與其 callback endpoint
"""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from core.exceptions import DirectoryUnavailable
from models import ParticipantStatus
from schemas import ParticipantEntry

logger = logging.getLogger(__name__)


class ParticipantDirectory:
    """
    參數：
        base_url: 名單服務網址；空字串表示沒有設定，一律回傳空名單
        client: 共用的 httpx.AsyncClient（測試時可注入 MockTransport）
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 5.0):
        self.base_url = (base_url or "").strip()
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_active(self) -> List[ParticipantEntry]:
        """
        取得目前名單

        接受兩種格式：
        - JSON list
        - {"participants": [...]}

        格式錯誤的單筆資料會被略過

        異常：
            DirectoryUnavailable: 連線失敗、非 2xx 或整體格式錯誤
        """
        if not self.base_url:
            return []

        try:
            resp = await self._client.get(self.base_url)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DirectoryUnavailable(f"Failed to fetch participants from {self.base_url}: {e}") from e

        if isinstance(body, dict):
            body = body.get("participants")
        if not isinstance(body, list):
            raise DirectoryUnavailable(f"Unexpected directory payload type: {type(body).__name__}")

        entries = []
        for raw in body:
            try:
                entries.append(ParticipantEntry.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed directory entry {raw!r}: {e}")
        return entries

    async def count_active(self) -> int:
        entries = await self.list_active()
        return sum(1 for entry in entries if entry.status == ParticipantStatus.ACTIVE.value)
