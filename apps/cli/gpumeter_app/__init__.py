"""GPU Meter command line application."""
