"""Core application components.

This module provides the foundational components for the Operations API:
- Supabase connection management and the table repository
- Identity provider over Supabase auth
- Application settings and configuration
"""
