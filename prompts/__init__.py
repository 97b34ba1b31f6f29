"""Jinja2 templates for englearn prompts."""
