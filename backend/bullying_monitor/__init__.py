"""School bullying survey service: intake, risk statistics and AI narrative reports."""

__version__ = "0.1.0"
