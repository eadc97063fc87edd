"""Service layer for gorn."""
