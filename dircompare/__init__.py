"""
dircompare - compare two directory trees and classify every file as
unchanged, added, removed or modified.
"""

APP_NAME = "dircompare"
APP_DISPLAY_NAME = "Directory Compare"
__version__ = "0.1.0"
