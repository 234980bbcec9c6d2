"""Cognition: decisions and the reasoning backends that produce them."""
