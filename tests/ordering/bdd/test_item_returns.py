"""BDD tests for item returns."""

from pytest_bdd import scenarios

scenarios("features/item_returns.feature")
