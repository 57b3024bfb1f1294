"""
Timeline CLI - inspect and replay serialized histories

Commands:
- timeline inspect - Show the event log and pointer of a history file
- timeline replay - Rebuild a store from a history file and time-travel
- timeline version - Show version information
"""
