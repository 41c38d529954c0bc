#!/usr/bin/env python3
"""Explain K8s Generator - Entry point."""
from explain_k8s.cli.commands import cli

if __name__ == "__main__":
    cli()
