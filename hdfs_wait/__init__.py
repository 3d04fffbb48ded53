"""Polling job that waits for a fresh folder on HDFS before a workflow proceeds."""

__version__ = "0.1.0"
