"""Begleitwerkzeuge für die lokale ChronoGlass API."""
