"""prco: check out pull request merge refs in CI."""

__version__ = "0.1.0"
