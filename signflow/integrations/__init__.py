"""Outbound integrations: Laravel backend, Notify email gateway, resident service."""
