"""Versioned HTTP routes; everything here sits under /v1 except auth and the relay."""
