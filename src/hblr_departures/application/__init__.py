"""Application layer - pure services over domain models."""
