"""ruleguard - validation of business-rule conditions and actions."""
__version__ = "0.1.0"
