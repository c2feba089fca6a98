"""
簽章服務：推播給參賽者的訊息簽章與驗證

sign(payload) -> {payload, signature, publicKey}
authenticate(envelope) -> {valid, payload}

- ed25519 detached signature（PyNaCl），signature 與 publicKey 皆為 base58
- payload 以緊湊 JSON（保留 key 順序、不轉義非 ASCII）序列化後簽章，
  與參賽端 JSON.stringify 的結果一致
- 參賽者只需要 publicKey 就能驗證，不需共享密鑰
"""
import json
import logging
from typing import Any, Dict, Optional

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

logger = logging.getLogger(__name__)

SEED_SIZE = 32
KEYPAIR_SIZE = 64


def canonical_json(payload: Any) -> bytes:
    if isinstance(payload, (dict, list)):
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    else:
        text = str(payload)
    return text.encode("utf-8")


def authenticate(envelope: Dict[str, Any], expected_public_key: Optional[str] = None) -> Dict[str, Any]:
    """
    以信封內的 publicKey 驗證簽章

    參數：
        envelope: {payload, signature, publicKey}
        expected_public_key: 指定時 publicKey 必須相符

    返回：
        {valid, payload}；欄位缺漏、編碼錯誤或簽章不符一律 valid=False，不拋異常
    """
    if not isinstance(envelope, dict):
        return {"valid": False, "payload": None}

    payload = envelope.get("payload")
    signature = envelope.get("signature")
    public_key = envelope.get("publicKey")
    if not isinstance(signature, str) or not isinstance(public_key, str):
        return {"valid": False, "payload": payload}
    if expected_public_key is not None and public_key != expected_public_key:
        return {"valid": False, "payload": payload}

    try:
        verify_key = VerifyKey(base58.b58decode(public_key))
        verify_key.verify(canonical_json(payload), base58.b58decode(signature))
    except (BadSignatureError, ValueError, TypeError):
        return {"valid": False, "payload": payload}
    return {"valid": True, "payload": payload}


class MessageSigner:
    """
    持有遊戲主機的 ed25519 金鑰

    secret 為 base58 編碼：32 bytes seed，或 64 bytes keypair（seed + public key）
    """

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("MessageSigner requires a non-empty secret")
        try:
            raw = base58.b58decode(secret)
        except ValueError as e:
            raise ValueError(f"Signing secret is not valid base58: {e}") from e
        if len(raw) not in (SEED_SIZE, KEYPAIR_SIZE):
            raise ValueError(f"Signing secret must decode to {SEED_SIZE} or {KEYPAIR_SIZE} bytes, got {len(raw)}")

        self._signing_key = SigningKey(raw[:SEED_SIZE])
        self.public_key = base58.b58encode(bytes(self._signing_key.verify_key)).decode("ascii")

    @classmethod
    def generate(cls) -> "MessageSigner":
        """沒有設定密鑰時使用的臨時金鑰（重啟後 publicKey 會改變）"""
        seed = bytes(SigningKey.generate())
        signer = cls(base58.b58encode(seed).decode("ascii"))
        logger.warning(f"No signing secret configured, using ephemeral key {signer.public_key}")
        return signer

    def sign(self, payload: Any) -> Dict[str, Any]:
        signature = self._signing_key.sign(canonical_json(payload)).signature
        return {
            "payload": payload,
            "signature": base58.b58encode(signature).decode("ascii"),
            "publicKey": self.public_key,
        }

    def authenticate(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        """只接受自己簽出的訊息"""
        return authenticate(envelope, expected_public_key=self.public_key)
