"""Extraction service component: the pipeline orchestrator and its wire models."""
