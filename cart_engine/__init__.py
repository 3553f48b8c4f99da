"""Cart Engine: shopping cart state, pricing and persistence."""

__version__ = "1.0.0"
