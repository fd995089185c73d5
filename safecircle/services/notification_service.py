# ============================================
# safecircle/services/notification_service.py - 알림 전달 서비스
# ============================================
# 화면 토스트와 이메일 발송을 담당합니다.
# 실제 발송은 하지 않고, 보낼 내용을 로그로 남기고 결과만 돌려줍니다.
# ============================================

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Deque, List, Optional
from urllib.parse import quote

from safecircle.config import settings

logger = logging.getLogger(__name__)


TOAST_VARIANTS = ("default", "destructive")


@dataclass(frozen=True)
class Toast:
    """화면에 잠깐 보여주는 알림"""
    title: str
    description: str
    variant: str
    created_at: datetime


@dataclass(frozen=True)
class DispatchResult:
    """이메일 발송 결과"""
    success: bool
    mailto: Optional[str] = None
    error: Optional[str] = None


class ToastSink:
    """
    토스트 대기열

    push() 한 토스트는 화면이 GET /notifications/toasts 로 가져갈 때까지
    보관됩니다. 대기열이 가득 차면 오래된 것부터 버립니다.
    """

    def __init__(self, maxlen: int = None):
        self._queue: Deque[Toast] = deque(maxlen=maxlen or settings.TOAST_QUEUE_SIZE)
        self._lock = threading.Lock()

    def push(self, title: str, description: str, variant: str = "default") -> Toast:
        """토스트를 추가합니다. 실패해도 호출한 쪽을 멈추지 않습니다."""
        if variant not in TOAST_VARIANTS:
            variant = "default"
        toast = Toast(
            title=title,
            description=description,
            variant=variant,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._queue.append(toast)
        logger.info(f"[toast:{variant}] {title} - {description}")
        return toast

    def drain(self) -> List[Toast]:
        """쌓인 토스트를 모두 꺼냅니다 (오래된 순)."""
        with self._lock:
            toasts = list(self._queue)
            self._queue.clear()
        return toasts

    def __len__(self) -> int:
        return len(self._queue)


def build_mailto(to: str, subject: str, body: str) -> str:
    """mailto: 링크 (제목/본문은 URL 인코딩)"""
    return f"mailto:{to}?subject={quote(subject, safe='')}&body={quote(body, safe='')}"


class EmailDispatcher:
    """
    이메일 발송기

    [신입 개발자를 위한 설명]
    실제 서비스라면 SendGrid, Mailgun 같은 외부 서비스를 호출합니다.
    여기서는 메일 클라이언트를 여는 mailto 링크를 만들고 로그로 남깁니다.
    실패는 예외 대신 DispatchResult 로 알려줍니다.
    """

    def __init__(self, history_size: int = 100):
        self.sent: Deque[DispatchResult] = deque(maxlen=history_size)

    def send(self, to: str, subject: str, body: str) -> DispatchResult:
        """
        이메일을 보냅니다.

        Args:
            to: 받는 사람 (쉼표로 여러 명)
            subject: 제목
            body: 본문

        Returns:
            DispatchResult: 성공 여부, mailto 링크, 오류 메시지
        """
        if not to or not to.strip():
            logger.warning(f"Email '{subject}' has no recipient")
            return DispatchResult(success=False, error="No recipient")

        mailto = build_mailto(to, subject, body)
        logger.info(f"Sending email to: {to}")
        logger.info(f"Subject: {subject}")
        logger.debug(f"Body: {body}")

        result = DispatchResult(success=True, mailto=mailto)
        self.sent.append(result)
        return result


# 애플리케이션 전체에서 쓰는 수집기
toast_sink = ToastSink()
email_dispatcher = EmailDispatcher()
