"""
Tournament Core - pure domain logic for tournament records

Responsibilities:
- Enumerated game/turn/special/final-result values
- Normalizing loosely typed request values into those enums
- Deriving the win/loss/tie score from a round collection
- Sanitizing and patching rounds before they are persisted
"""
