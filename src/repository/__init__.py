"""Clients for source repositories hosting formula taps."""
