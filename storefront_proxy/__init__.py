"""
Storefront Proxy Service - signed app-proxy endpoint for tournament records

Responsibilities:
- Verify the storefront's request signature
- Route a named action to its handler
- Scope every read/write to the logged-in customer
- Persist tournaments with a consistent derived score
"""
