# pool/clock.py
import time

def current_millis() -> int:
    """Wall-clock time in milliseconds since the epoch"""
    return int(time.time() * 1000)
