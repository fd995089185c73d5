"""
SafeCircle 백엔드

안전점수, 지역 안전 평가 지도, 비상연락처, SOS, 가디언 모드, 안전 체크인을 제공합니다.
"""

__version__ = "1.0.0"
