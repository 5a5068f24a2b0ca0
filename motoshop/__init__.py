"""Motorcycle workshop reporting backend."""
