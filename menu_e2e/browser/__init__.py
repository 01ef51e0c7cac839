"""Browser lifecycle, device emulation and in-page measurements."""
