"""Request paths from a chat request to an agent.

- **dispatch**: target resolution and the single-shot message path
- **streaming**: the SSE event relay state machine
"""
