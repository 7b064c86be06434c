"""QR Forge: QR code generation service."""
