"""Real-time collaboration relay."""

from ace.collab.hub import CollaborationHub, Participant

__all__ = ["CollaborationHub", "Participant"]
