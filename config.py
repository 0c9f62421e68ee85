"""
탐색기(Flask 앱) 설정
=====================

환경 변수로 덮어쓸 수 있다:

    ZKB_SECRET_KEY      Flask secret key
    ZKB_DB_PATH         TinyDB 파일 경로. 비어 있으면 메모리 DB
    ZKB_DEFAULT_DEGREE  /kzg/setup 요청에 degree가 없을 때의 CRS 차수
    ZKB_SEED            CRS τ 시드. 비어 있으면 secrets로 τ를 뽑는다
"""

import os

DEFAULT_SECRET_KEY = os.getenv("ZKB_SECRET_KEY", "key")
DEFAULT_DB_PATH = os.getenv("ZKB_DB_PATH", "")
DEFAULT_DEGREE = int(os.getenv("ZKB_DEFAULT_DEGREE", 10))
DEFAULT_SEED = os.getenv("ZKB_SEED", "")


class Config:
    """app.config.from_object 용 설정 클래스."""

    SECRET_KEY = DEFAULT_SECRET_KEY
    DB_PATH = DEFAULT_DB_PATH
    DEFAULT_DEGREE = DEFAULT_DEGREE
    # 빈 문자열이면 None (비결정론적 τ)
    SEED = DEFAULT_SEED or None


class TestingConfig(Config):
    TESTING = True
    DB_PATH = ""
    DEFAULT_DEGREE = 4
    SEED = "test"
