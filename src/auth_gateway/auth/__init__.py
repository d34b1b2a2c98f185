"""Authentication: credential extraction, verification and token issuance."""
