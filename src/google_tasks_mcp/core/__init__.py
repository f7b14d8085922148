"""Request validation, envelopes and the Google Tasks adapter."""
