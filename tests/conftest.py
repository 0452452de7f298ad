import pytest

from state_affordability.core.reference_data import load_reference_data
from tests.helpers import make_inputs, make_reference, make_state


@pytest.fixture
def state():
    return make_state()


@pytest.fixture
def inputs():
    return make_inputs()


@pytest.fixture
def reference():
    return make_reference(
        make_state(),
        make_state(name="Lowcost", abbr="LC", salary=50_000, cost_of_living=30_000, home_value=200_000),
        make_state(name="Pricey", abbr="PR", salary=90_000, cost_of_living=60_000, home_value=900_000),
    )


@pytest.fixture
def bundled_reference():
    return load_reference_data()
