"""Chess against a negamax computer opponent, with a pygame board and a search benchmark."""

__version__ = "0.1.0"
__all__ = ["__version__"]