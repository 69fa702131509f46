"""Roster membership synchronization service."""
