"""Logging, audit and snapshot-loading helpers."""
