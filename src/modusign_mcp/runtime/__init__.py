"""Runtime - execution concerns shared by the client and tool layers.

Contains: throttle retry, concurrent fan-out, structured logging.
"""
