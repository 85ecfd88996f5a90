"""
SC Noticeboard — cause-list sequencing and proximity alerts for court queues.

Architecture: Upstream feed → Normalizer (Sequence parser) → TTL cache → Proximity engine → Notifier
Philosophy:  The feed is free text typed by operators. Degrade to a status, never to an exception.
"""

__version__ = "1.0.0"
