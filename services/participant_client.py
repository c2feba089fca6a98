"""
參賽者推播 client

POST {boardState, roundNumber}（有設定簽章時包成簽章信封）到參賽者 endpoint，
等待回覆 {"guess": "..."}
"""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from core.board_store import BoardState
from core.exceptions import ParticipantUnreachable
from schemas import GuessReply, ParticipantEntry
from services.signing_service import MessageSigner

logger = logging.getLogger(__name__)


class ParticipantClient:
    """
    參數：
        timeout: 每次呼叫的上限秒數，一位參賽者卡住不會拖住整個 guess cycle
        signer: 可選的 MessageSigner
    """

    def __init__(
        self,
        timeout: float,
        signer: Optional[MessageSigner] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.signer = signer
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_payload(self, board: BoardState, round_number: int) -> dict:
        payload = {"boardState": board.to_dict(), "roundNumber": round_number}
        if self.signer is not None:
            return self.signer.sign(payload)
        return payload

    async def request_guess(self, participant: ParticipantEntry, board: BoardState, round_number: int) -> Optional[str]:
        """
        推播目前 BoardState 並取得參賽者的猜測

        返回：
            參賽者回傳的原始 guess 字串；回覆格式錯誤時回傳 None

        異常：
            ParticipantUnreachable: 連線失敗、逾時或非 2xx
        """
        try:
            resp = await self._client.post(
                participant.endpoint,
                json=self.build_payload(board, round_number),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ParticipantUnreachable(participant.id, f"{type(e).__name__}: {e}") from e

        try:
            reply = GuessReply.model_validate(resp.json())
        except (ValueError, ValidationError):
            logger.info(f"Malformed reply from {participant.id}, treating as no guess")
            return None
        return reply.guess
