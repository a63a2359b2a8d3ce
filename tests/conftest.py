import pytest

from knapsack_stepper.engine.session import KnapsackSession
from knapsack_stepper.model.items import Item, KnapsackModel

ABC = [("A", 6, 2), ("B", 10, 4), ("C", 12, 6)]


@pytest.fixture
def abc_items():
    return [Item(name, value, weight) for name, value, weight in ABC]


@pytest.fixture
def abc_session():
    return KnapsackSession(KnapsackModel.from_tuples(ABC, 10))
