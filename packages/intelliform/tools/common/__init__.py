"""Shared context and registry for IntelliForm tools."""
