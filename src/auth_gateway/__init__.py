"""Product catalog API guarded by pluggable authentication schemes."""
