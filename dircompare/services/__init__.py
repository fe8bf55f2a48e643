"""
Services shared by the front ends: file I/O, settings, the shared file
store and report rendering.
"""
