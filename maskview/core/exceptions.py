class MaskViewError(Exception):
    """Base exception for all maskview errors"""
    pass

class ConfigError(MaskViewError, ValueError):
    """Invalid or inconsistent loader configuration"""
    pass

class SourceReadError(MaskViewError, OSError):
    """Source file does not exist or cannot be read"""
    pass

class SchemaError(MaskViewError, ValueError):
    """
    Header of the loaded source is unusable:
    duplicate column names, or no header line at all
    """
    pass

class SizeMismatchError(MaskViewError, ValueError):
    """A mask and the container it masks have different lengths"""
    pass

class ArityMismatchError(MaskViewError, ValueError):
    """Active column count does not match the requested or declared arity"""
    pass

class UnknownColumnError(MaskViewError, KeyError):
    """Column name is not part of the header"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Column '{self.name}' not found in header"

class CrossTableError(MaskViewError, ValueError):
    """Views backed by different tables cannot be combined"""
    pass

class OutOfRangeError(MaskViewError, IndexError):
    """Cell access beyond the loaded extents"""
    pass

class ConversionError(MaskViewError, ValueError):
    """Non-empty cell could not be parsed as the requested type"""

    def __init__(self, cell: str, target: type):
        self.cell = cell
        self.target = target
        name = getattr(target, "__name__", repr(target))
        super().__init__(f"Cannot convert '{cell}' to {name}")
