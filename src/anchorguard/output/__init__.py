"""Run reporters."""
