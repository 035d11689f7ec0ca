"""lift-tracker: WOD notation, lift logging and personal records."""

__version__ = "0.1.0"
