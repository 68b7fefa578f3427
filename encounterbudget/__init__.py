"""Encounter budget tooling for PF2e game masters."""
