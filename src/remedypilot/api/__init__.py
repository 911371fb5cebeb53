"""RemedyPilot HTTP service."""
