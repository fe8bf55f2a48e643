"""
Native (PyQt6) viewer.
"""
