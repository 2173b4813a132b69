"""eVTOL fleet simulator — flight, battery depletion, charger queueing and faults."""

__version__ = "1.0.0"
