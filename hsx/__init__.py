"""Screen fingerprinting and field OCR for recorded gameplay video."""
__version__ = "0.1.0"
