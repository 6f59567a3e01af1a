import pytest

from fakes import make_w3


@pytest.fixture
def w3_and_contract():
    return make_w3()
