"""repometer - repository quality metrics and net score."""

__version__ = "0.1.0"
