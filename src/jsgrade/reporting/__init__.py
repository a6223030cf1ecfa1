"""Sinks that turn a ResultSet into files and network calls."""
