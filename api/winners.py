"""
Winner API Endpoints

職責：
1. 查詢歷屆系列賽冠軍（依寫入順序）
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas import WinnerRecordResponse, WinnersResponse
from services.history_service import read_winners

router = APIRouter(prefix="/api", tags=["winners"])
logger = logging.getLogger(__name__)


@router.get("/winners", response_model=WinnersResponse)
def get_winners(db: Session = Depends(get_db)):
    """
    取得冠軍歷史

    返回：
        - winners: [{participant_id, series_win_count, timestamp, transfer_receipt}]
          transfer_receipt 為 null 表示當次獎勵發放失敗
    """
    try:
        records = read_winners(db)
        return WinnersResponse(
            winners=[WinnerRecordResponse.model_validate(record) for record in records]
        )

    except SQLAlchemyError as e:
        logger.error(f"Failed to read winner history: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
