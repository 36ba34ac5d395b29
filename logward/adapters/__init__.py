"""Integrations that call the engine from logging frameworks."""
