"""cytubegen - CyTube custom media manifest generator."""

__version__ = "0.1.0"
