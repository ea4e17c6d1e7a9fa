"""twstrata -- tiered Tailwind stylesheet builder."""

__version__ = "0.1.0"
