"""Table reconstruction: drawing instructions and text runs to populated grid cells."""
