"""Add-account flow."""
