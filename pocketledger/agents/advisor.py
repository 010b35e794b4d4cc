"""
AI Financial Advisor

DESIGN DECISION: The advisor is an OPTIONAL commentator. It reads the
user's recent transactions and returns free-form advice text for display.

CRITICAL BOUNDARIES:
- CAN: Comment on spending habits, suggest ways to save
- CANNOT: Modify, create or re-categorize transactions
- NEVER fails loudly: missing configuration or a failed API call degrades
  to a static message. Advice is a nice-to-have, not an error state.
"""

import json
from typing import Optional, Sequence

import google.generativeai as genai
from pydantic import BaseModel, Field

from pocketledger.audit import get_logger
from pocketledger.config import GeminiSettings, get_settings
from pocketledger.models.transaction import Transaction, serialize_amount


logger = get_logger(__name__)

DEFAULT_WINDOW = 50

NO_DATA_MESSAGE = "Hãy thêm một vài giao dịch để tôi có thể phân tích giúp bạn nhé!"
UNCONFIGURED_MESSAGE = (
    "Trợ lý AI chưa được cấu hình. Thêm GEMINI_API_KEY để nhận lời khuyên "
    "về thói quen chi tiêu của bạn."
)
EMPTY_RESPONSE_MESSAGE = "Xin lỗi, hiện tại tôi không thể đưa ra lời khuyên. Hãy thử lại sau."
FAILURE_MESSAGE = "Đã có lỗi xảy ra khi kết nối với chuyên gia AI. Vui lòng thử lại sau."


class AdviceResponse(BaseModel):
    """Advice text plus where it came from."""

    text: str
    source: str = Field(
        ...,
        pattern="^(model|static|unconfigured|fallback)$",
        description="model = generated; anything else = canned message"
    )
    transaction_count: int = Field(default=0, ge=0)

    @property
    def is_generated(self) -> bool:
        return self.source == "model"


class FinancialAdvisor:
    """
    Gemini-backed spending commentator.

    Only the most recent transactions (window, default 50) are sent, to
    keep the prompt small and the advice about current habits.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        window: int = DEFAULT_WINDOW,
    ):
        self._settings = settings or get_settings().gemini
        self._window = window
        self._model = None

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _get_model(self):
        """Configure Google Generative AI lazily (no key, no client)."""
        if self._model is None:
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                }
            )
        return self._model

    def recent(self, transactions: Sequence[Transaction]) -> list[Transaction]:
        """The newest transactions, newest first."""
        newest_first = sorted(transactions, key=lambda t: t.date, reverse=True)
        return newest_first[:self._window]

    def build_prompt(self, transactions: Sequence[Transaction]) -> str:
        records = [
            {
                "date": t.date.isoformat(),
                "type": t.type.value,
                "amount": serialize_amount(t.amount),
                "category": t.category,
                "note": t.note,
            }
            for t in transactions
        ]

        return f"""Bạn là một trợ lý tài chính cá nhân thông minh, thân thiện và hơi hài hước.
Dưới đây là danh sách các giao dịch gần đây của người dùng:
{json.dumps(records, ensure_ascii=False)}

Hãy phân tích thói quen chi tiêu này và đưa ra:
1. Một nhận xét tổng quan ngắn gọn về tình hình tài chính hiện tại.
2. 3 lời khuyên cụ thể, thực tế để giúp họ quản lý tiền tốt hơn hoặc tiết kiệm hiệu quả hơn.

Hãy dùng ngôn ngữ tiếng Việt tự nhiên, định dạng Markdown (dùng bullet points). Đừng quá cứng nhắc."""

    async def get_advice(self, transactions: Sequence[Transaction]) -> AdviceResponse:
        """
        Generate advice for the given transactions.

        Never raises; every failure path returns a canned message.
        """
        if not transactions:
            return AdviceResponse(text=NO_DATA_MESSAGE, source="static")

        if not self.is_configured:
            return AdviceResponse(text=UNCONFIGURED_MESSAGE, source="unconfigured")

        recent = self.recent(transactions)
        prompt = self.build_prompt(recent)

        try:
            response = await self._get_model().generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.warning("advice_request_failed", error=str(e))
            return AdviceResponse(
                text=FAILURE_MESSAGE,
                source="fallback",
                transaction_count=len(recent),
            )

        if not text:
            return AdviceResponse(
                text=EMPTY_RESPONSE_MESSAGE,
                source="fallback",
                transaction_count=len(recent),
            )

        return AdviceResponse(text=text, source="model", transaction_count=len(recent))
