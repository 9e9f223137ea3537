from concurrent.futures import ThreadPoolExecutor

import pytest


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="test-parser")
    yield pool
    pool.shutdown(wait=True)
