"""Application layer for the chat client.

Contains:
- protocol/: Canonical events, outbound envelope, frame normalization
- websocket/: Socket lifecycle state machine and ConnectionManager
- session/: Backend-assigned identity tracking
- orchestrator/: Stream assembly, observable state, event dispatch
- settings: Configuration and logging setup
"""
