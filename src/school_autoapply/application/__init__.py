"""
Application layer for school auto-apply automation.

This layer contains application services that orchestrate domain models and infrastructure.
Services coordinate between the domain layer and external dependencies like browsers and files.
"""
