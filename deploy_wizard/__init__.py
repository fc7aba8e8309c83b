"""Deploy Wizard: generates Django deployment scripts from a guided configuration."""

__version__ = "0.1.0"
