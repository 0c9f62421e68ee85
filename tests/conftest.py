import sys
import os
import random

import pytest

# 프로젝트 루트를 sys.path에 추가 (app.py, serializers.py 등 최상위 모듈용)
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


@pytest.fixture
def rng():
    """재현 가능한 난수 생성기."""
    return random.Random(1337)
