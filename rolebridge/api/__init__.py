"""HTTP adapter (Flask blueprints) over rolebridge.core."""
