"""Agentic components built on LangChain chat models."""
