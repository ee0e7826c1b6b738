"""State layer.

This package holds the per-appliance item cache and the components that
decide when and how it changes: connectivity tracking, resynchronisation
after reconnection and power-state inference.
"""
