"""Foundation - building blocks shared by the client, file resolution and tool layers.

Contains: error model, configuration, tool base class, registry.
"""
