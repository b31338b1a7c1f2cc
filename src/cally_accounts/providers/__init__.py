"""Provider capability descriptors."""
