"""Shared utilities and cross-domain components.

This module contains utilities used across multiple domains:
- Exception classes for consistent error handling
- Permission model for role-based visibility and capabilities
- Resource service base for uniform CRUD over Supabase tables
"""
