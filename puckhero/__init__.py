"""
PuckHero Online: authoritative two-player air hockey server.
"""
