"""Gateways wrapping side effects (filesystem, clock) behind ABCs."""
