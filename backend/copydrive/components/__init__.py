"""Core Business Components.

This package contains independent business modules:
- ai_gateway: chat-completions client with forced tool calls
- structured: field registry and the generate/validate/repair pipeline
- audience: advanced audience analysis
- copy_optimizer: copy optimization and variation
"""
