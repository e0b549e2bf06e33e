"""Interactive console surfaces for the AVR PWM calculator."""
