"""Storage, hashing and session services used by the accounts controllers."""
