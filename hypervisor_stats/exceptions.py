# exceptions.py

"""Custom exceptions for Hypervisor Stats."""

class HypervisorStatsError(Exception):
    """Base exception for all Hypervisor Stats errors."""
    pass

class ParseError(HypervisorStatsError):
    """Exception for size or count fields whose magnitude cannot be parsed."""
    pass

class SchemaError(HypervisorStatsError):
    """Exception for node attribute trees missing a required probe path."""
    pass

class InventoryError(HypervisorStatsError):
    """Exception for failures fetching node records from the inventory."""
    pass

class ConfigurationError(HypervisorStatsError):
    """Exception for configuration-related errors."""
    pass
