"""Command line interface for reddit-oauth."""
