"""
All the structures needed for the engine and the probes.

They do not depend on the clients, the actions, or the kits. Only on the
helpers, and even that is an exception rather than a rule.
"""
