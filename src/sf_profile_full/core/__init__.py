"""Core types shared across the retrieval pipeline."""
