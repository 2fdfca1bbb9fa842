"""Workflow generators: the swappable source of new or modified workflows."""
