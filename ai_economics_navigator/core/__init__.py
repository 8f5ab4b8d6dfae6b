"""
Core modules for AI Economics Navigator.

This package contains the deterministic projection engines for the
translation, RAG and productivity ROI scenarios, plus the shared model
catalog and input normalization they rely on.
"""
