"""QR Code encoding with Reed-Solomon error correction and a terminal renderer."""

__version__ = "0.1.0"
__all__ = ["console", "ecc", "encoder", "matrix", "segments"]