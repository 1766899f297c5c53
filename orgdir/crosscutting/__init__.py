"""Crosscutting concerns: configuration, logging, typed exceptions."""
