import pytest
from mudcolumn.physical_constants import physical_constants


@pytest.fixture(autouse=True)
def restore_physical_constants():
    """Restore physical constants modified by a test"""
    saved = dict(physical_constants)
    yield
    physical_constants.clear()
    physical_constants.update(saved)
