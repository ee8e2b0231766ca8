"""Decryption routines for WOLF RPG Editor game data, keys and WolfX files."""

__version__ = "0.1.0"