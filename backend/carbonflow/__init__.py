"""CarbonFlow: environmental-credit project onboarding and compliance tracking."""

__version__ = "0.1.0"
