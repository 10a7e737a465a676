"""Foodie places backend."""
