"""Key generation, checksum validation and decryption of WolfX files."""

__all__ = ["benchmark", "crack", "datamanip", "generator", "model", "utils", "validate"]